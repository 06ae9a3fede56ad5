from supabase import create_client, Client
from dotenv import load_dotenv
import os

load_dotenv()


def get_supabase_client(access_token: str | None = None) -> Client:
    """
    Get initialized Supabase client.

    When an access token is given, PostgREST requests run as that user so
    row level security on email_logs applies.
    """
    url: str | None = os.getenv("SUPABASE_URL")
    key: str | None = os.getenv("SUPABASE_SERVICE_KEY")

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

    client = create_client(url, key)
    if access_token:
        client.postgrest.auth(access_token)
    return client
