import asyncio
import logging
import pymysql

import messages
from config import db_config
from constants import DB_DETAILS

logger = logging.getLogger(__name__)

TABLE_NAME = DB_DETAILS["table_name"]

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    patientid INT AUTO_INCREMENT PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    dateOfBirth DATETIME
) ENGINE=innoDB;
"""

INSERT_PATIENT_SQL = f"INSERT INTO {TABLE_NAME} (name, dateOfBirth) VALUES (%s, CAST(%s AS DATETIME))"


class DatabaseError(Exception):
    """Raised when connecting to or querying MySQL fails."""


def connect_to_db(params):
    """Establish a connection to the MySQL instance."""
    try:
        return pymysql.connect(**params, cursorclass=pymysql.cursors.DictCursor)
    except pymysql.MySQLError as e:
        logger.error(f"Database connection failed: {e}")
        raise DatabaseError(str(e)) from e


def execute_query(config, sql, values=None, use_database=True):
    """Run one statement on a fresh connection and close it afterwards.

    Read statements return ``{"rows": [...]}``; anything else is committed and
    returns ``{"affected_rows": n, "insert_id": id}``.
    """
    connection = connect_to_db(db_config(config, use_database=use_database))
    try:
        with connection.cursor() as cursor:
            cursor.execute(sql, values)
            if cursor.description:
                return {"rows": list(cursor.fetchall())}
            connection.commit()
            return {"affected_rows": cursor.rowcount, "insert_id": cursor.lastrowid}
    except pymysql.MySQLError as e:
        raise DatabaseError(str(e)) from e
    finally:
        connection.close()


def initialize_database(config):
    """Create the database and the patients table when they are absent.

    Failures are logged, not raised. Returns True when both statements succeeded.
    """
    db_name = config["db_name"]
    logger.info(messages.log_db_init_attempt(db_name))
    try:
        execute_query(config, f"CREATE DATABASE IF NOT EXISTS `{db_name}`", use_database=False)
    except DatabaseError as e:
        logger.error(messages.log_db_error_create(e))
        return False
    logger.info(messages.log_db_ensured(db_name))

    try:
        execute_query(config, CREATE_TABLE_SQL)
    except DatabaseError as e:
        logger.error(messages.log_table_error_create(TABLE_NAME, e))
        return False
    logger.info(messages.log_table_ensured(TABLE_NAME))
    return True


def insert_patient(config, name, date_of_birth):
    return execute_query(config, INSERT_PATIENT_SQL, (name, date_of_birth))


async def insert_patients_async(config, records):
    """Insert each record on its own connection, dispatched in order and awaited together."""
    loop = asyncio.get_running_loop()
    futures = [
        loop.run_in_executor(None, insert_patient, config, record["name"], record["dateOfBirth"])
        for record in records
    ]
    outcomes = await asyncio.gather(*futures, return_exceptions=True)

    results = []
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, DatabaseError):
            logger.error(messages.err_db_generic(outcome))
            results.append({"index": index, "success": False, "message": messages.err_db_generic(outcome)})
        elif isinstance(outcome, Exception):
            # Sibling inserts may already be committed; report, don't abort the batch
            logger.error(f"Unexpected error inserting record {index}: {outcome!r}", exc_info=outcome)
            results.append({"index": index, "success": False, "message": messages.err_db_generic(outcome)})
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append({"index": index, "success": True, "insertId": outcome["insert_id"]})
    return results


def insert_patients(config, records):
    """Bulk insert; returns one result entry per record, in request order."""
    return asyncio.run(insert_patients_async(config, records))
