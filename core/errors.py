# core/errors.py

# PostgREST: "JSON object requested, multiple (or no) rows returned"
POSTGREST_NO_ROWS = "PGRST116"


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST APIError / GoTrue errors expose .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or type(error).__name__


def supabase_error_code(error: Exception):
    """Return the PostgREST error code (e.g. "PGRST116") if the error carries one."""
    code = getattr(error, "code", None)
    if code:
        return str(code)

    # Some client versions only put the payload dict in args[0]
    if getattr(error, "args", None) and isinstance(error.args[0], dict):
        code = error.args[0].get("code")
        return str(code) if code else None

    return None


def is_not_found_error(error: Exception) -> bool:
    """True when the store reported "no rows" rather than a real failure."""
    return supabase_error_code(error) == POSTGREST_NO_ROWS
