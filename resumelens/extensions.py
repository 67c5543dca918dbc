# resumelens/extensions.py
import logging
from supabase import create_client

from resumelens.services.n8n import N8nClient

# 1) Small factory to build a Supabase (service-role) client from config
def init_supabase(config):
    url = config.get("SUPABASE_URL")
    key = config.get("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        logging.warning("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not set; status bookkeeping disabled")
        return None
    return create_client(url, key)

# 2) n8n workflow client; None means "always use the heuristic scorer"
def init_n8n(config):
    if not config.get("N8N_ENABLED") or not config.get("N8N_BASE_URL"):
        logging.info("n8n disabled; analyses use the heuristic scorer")
        return None
    return N8nClient(
        base_url=config["N8N_BASE_URL"],
        api_key=config.get("N8N_API_KEY") or None,
        timeout=(config.get("N8N_CONNECT_TIMEOUT", 5), config.get("N8N_READ_TIMEOUT", 60)),
        retries=config.get("N8N_RETRIES", 1),
    )
