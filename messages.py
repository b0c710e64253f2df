"""User facing strings for the patient gateway, log lines included."""

# Log lines
def log_db_init_attempt(db_name):
    return f"[DB] Attempting to initialize DB: {db_name}"

def log_db_error_create(error):
    return f"[DB] Error creating database: {error}"

def log_db_ensured(db_name):
    return f"[DB] Database {db_name} ensured."

def log_table_error_create(table_name, error):
    return f"[DB] Error creating table {table_name}: {error}"

def log_table_ensured(table_name):
    return f"[DB] Table {table_name} ensured with ENGINE=innoDB."

def log_security_blocked(command):
    return f"[SECURITY] Blocked query attempt: {command}"

def log_bulk_insert_receive(count):
    return f"[SERVER] Received Bulk Insert Request for {count} records."

def log_server_running(host, port):
    return f"Patient Database Server (Origin 2) running at http://{host}:{port}/"

LOG_CORS_NOTE = "NOTE: The client must be served from a different origin (Origin 1) for proper CORS testing."

# HTTP error responses
ERR_INVALID_JSON = "Invalid JSON body."
ERR_MISSING_BULK_ARRAY = "Expected a non-empty array of patient records."
ERR_MISSING_BULK_FIELDS = "Each record must contain 'name' and 'dateOfBirth'."
ERR_SQL_MISSING = "SQL query is missing."
ERR_SQL_FORBIDDEN = "Forbidden: Only SELECT and INSERT queries are allowed."
ERR_ENDPOINT_NOT_FOUND = "Endpoint not found."
ERR_INTERNAL = "Internal server error."

def err_db_generic(error):
    return f"Database Error: {error}"

def err_method_mismatch(command, expected):
    return f"Method Not Allowed. '{command}' must use {expected}."

def err_bulk_partial(failed, total):
    return f"Failed to insert {failed} of {total} patient records."

# HTTP success responses
def success_select(count):
    return f"Successfully executed SELECT query. Found {count} rows."

def success_insert_raw(rows):
    return f"Successfully executed INSERT query. Rows affected: {rows}."

def success_insert_bulk(count):
    return f"Successfully inserted {count} patient records."
