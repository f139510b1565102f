"""PostgreSQL schema for the transactional store."""
import logging

from orgflow.data.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS account (
        entity_id VARCHAR(32) PRIMARY KEY,
        first_name VARCHAR(255),
        last_name VARCHAR(255),
        email VARCHAR(320) NOT NULL UNIQUE,
        account_created_at TIMESTAMPTZ NOT NULL,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS organization_plan (
        entity_id VARCHAR(32) PRIMARY KEY,
        plan_name VARCHAR(255),
        subscribed BOOLEAN NOT NULL DEFAULT TRUE,
        seat_limit INTEGER NOT NULL DEFAULT -1,
        message_limit INTEGER NOT NULL DEFAULT -1,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS organization (
        entity_id VARCHAR(32) PRIMARY KEY,
        company_name VARCHAR(255) NOT NULL,
        owner_id VARCHAR(32) NOT NULL REFERENCES account (entity_id),
        plan_id VARCHAR(32) NOT NULL REFERENCES organization_plan (entity_id) ON DELETE CASCADE,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workspace (
        entity_id VARCHAR(32) PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        organization_id VARCHAR(32) NOT NULL REFERENCES organization (entity_id) ON DELETE CASCADE,
        api_key VARCHAR(255) NOT NULL UNIQUE,
        timezone_utc_offset VARCHAR(16),
        push_platforms JSONB NOT NULL DEFAULT '{}'::jsonb,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS organization_team (
        entity_id VARCHAR(32) PRIMARY KEY,
        team_name VARCHAR(255) NOT NULL,
        organization_id VARCHAR(32) NOT NULL REFERENCES organization (entity_id) ON DELETE CASCADE,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS team_member (
        entity_id VARCHAR(32) PRIMARY KEY,
        team_id VARCHAR(32) NOT NULL REFERENCES organization_team (entity_id) ON DELETE CASCADE,
        account_id VARCHAR(32) NOT NULL REFERENCES account (entity_id) ON DELETE CASCADE,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL,
        CONSTRAINT team_member_team_account_key UNIQUE (team_id, account_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS organization_invite (
        entity_id VARCHAR(32) PRIMARY KEY,
        email VARCHAR(320) NOT NULL,
        organization_id VARCHAR(32) NOT NULL REFERENCES organization (entity_id) ON DELETE CASCADE,
        team_id VARCHAR(32) NOT NULL REFERENCES organization_team (entity_id) ON DELETE CASCADE,
        created_on TIMESTAMPTZ NOT NULL,
        changed_on TIMESTAMPTZ NOT NULL,
        CONSTRAINT organization_invite_organization_email_key UNIQUE (organization_id, email)
    )
    """,
]

# Columns declared UNIQUE above, used by adapters that enforce constraints themselves.
UNIQUE_KEYS = {
    'account': [('email',)],
    'workspace': [('api_key',)],
    'team_member': [('team_id', 'account_id')],
    'organization_invite': [('organization_id', 'email')],
}


def apply_schema(uow: UnitOfWork):
    """Creates every table that does not exist yet, inside the given unit of work."""
    for statement in SCHEMA_STATEMENTS:
        uow.adapter.execute_query(statement)
    logger.info("Applied %d schema statements", len(SCHEMA_STATEMENTS))
