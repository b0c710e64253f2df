# constants.py

# Database details
DB_DETAILS = {
    'db_name': 'node_patient_db',
    'table_name': 'patients',
    'port': 3306
}

# Gateway listener defaults
SERVER_DETAILS = {
    'host': '0.0.0.0',
    'port': 8000
}

# Commands the gateway forwards, and the mutating ones it refuses outright
ALLOWED_COMMANDS = ['SELECT', 'INSERT']
BLOCKED_COMMANDS = ['UPDATE', 'DELETE', 'DROP', 'ALTER', 'TRUNCATE', 'CREATE']
BLOCKED = 'BLOCKED'

# Error type tags echoed in the JSON body
ERR_TYPE_SERVER = 'SERVER ERROR'
ERR_TYPE_DB = 'DB ERROR'
ERR_TYPE_SECURITY = 'SECURITY ERROR'
ERR_TYPE_METHOD = 'METHOD ERROR'
ERR_TYPE_INPUT = 'INPUT ERROR'
ERR_TYPE_JSON = 'JSON ERROR'

ERROR_STATUS = {
    ERR_TYPE_SERVER: 500,
    ERR_TYPE_DB: 500,
    ERR_TYPE_SECURITY: 403,
    ERR_TYPE_METHOD: 405,
    ERR_TYPE_INPUT: 400,
    ERR_TYPE_JSON: 400,
}

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}
