import sys
import time
import argparse
import requests

DEFAULT_GATEWAY_URL = "http://localhost:8000"

# Sample batch posted by the `insert` command
SAMPLE_PATIENTS = [
    {"name": "Sara Brown", "dateOfBirth": "1901-01-01"},
    {"name": "John Smith", "dateOfBirth": "1941-01-01"},
    {"name": "Jack Ma", "dateOfBirth": "1961-01-30"},
    {"name": "Elon Musk", "dateOfBirth": "1999-01-01"},
]


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description='Patient gateway client')
    parser.add_argument('--url', default=DEFAULT_GATEWAY_URL, help='Base URL of the gateway')
    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('insert', help='Insert the sample patient records')
    query_parser = subparsers.add_parser('query', help='Run a SELECT (GET) or INSERT (POST) query')
    query_parser.add_argument('sql', help='SQL statement to send')
    return parser.parse_args(argv)


def send_insert_request(session, base_url, records):
    """Send the bulk insert request to the gateway."""
    start_time = time.time()
    response = session.post(f"{base_url}/insert-data", json=records)
    elapsed_time = time.time() - start_time
    return response, elapsed_time


def send_query_request(session, base_url, sql):
    """SELECT goes as a GET query parameter, everything else as a POST body."""
    start_time = time.time()
    if sql.strip().upper().startswith("SELECT"):
        response = session.get(f"{base_url}/execute-query", params={"query": sql})
    else:
        response = session.post(f"{base_url}/execute-query", json={"query": sql})
    elapsed_time = time.time() - start_time
    return response, elapsed_time


def print_response(response, elapsed_time):
    print(f"Status: {response.status_code} ({elapsed_time:.4f} seconds)")
    try:
        print(response.json())
    except ValueError:
        print(response.text)


def main(argv=None):
    args = parse_arguments(argv)
    base_url = args.url.rstrip('/')

    with requests.Session() as session:
        if args.command == 'insert':
            response, elapsed_time = send_insert_request(session, base_url, SAMPLE_PATIENTS)
        else:
            response, elapsed_time = send_query_request(session, base_url, args.sql)

    print_response(response, elapsed_time)
    return 0 if response.ok else 1


if __name__ == "__main__":
    sys.exit(main())
