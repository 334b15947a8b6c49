#!/usr/bin/env python3
"""
Command-line script for operating the contact messages table.

Usage:
    python scripts/manage_messages.py [--create-table] [--list-open] [--issue-token USER]

Options:
    --create-table    Create the messages table and its status index
    --list-open       Show the first page of open messages, newest first
    --issue-token     Print a moderator access token for USER
    --dry-run         Show the table definition without creating it
"""

import argparse
import json
import logging
import os
import sys

import boto3
from botocore.exceptions import BotoCoreError, ClientError

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from services.auth_service import AuthService
from services.exceptions import StoreError
from services.message_store import MessageStore
from services.moderation_service import ModerationService
from utils.dynamodb_utils import create_messages_table, message_table_definition

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def get_table_name() -> str:
    """Table name from the environment, matching the API handler default."""
    environment = os.environ.get("ENVIRONMENT", "dev")
    return os.environ.get(
        "CONTACT_MESSAGES_TABLE", f"contact-intake-messages-{environment}"
    )


def create_table(table_name: str, dry_run: bool = False):
    """Create the messages table."""
    if dry_run:
        logger.info("DRY RUN: Would create the following table:")
        print(json.dumps(message_table_definition(table_name), indent=2))
        return

    try:
        dynamodb = boto3.resource("dynamodb")
        logger.info(f"Creating DynamoDB table: {table_name}")
        table = create_messages_table(dynamodb, table_name)
        print(f"✅ Table {table.table_name} is ready")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"Table {table_name} already exists")
            return
        logger.error(f"AWS error: {e.response['Error']['Message']}")
        sys.exit(1)
    except BotoCoreError as e:
        logger.error(f"Failed to create table: {str(e)}")
        sys.exit(1)


def list_open(table_name: str):
    """Show the newest open messages."""
    try:
        table = boto3.resource("dynamodb").Table(table_name)
        result = ModerationService(MessageStore(table)).list_open()
    except StoreError as e:
        logger.error(f"Failed to list messages: {str(e)}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("OPEN CONTACT MESSAGES")
    print("=" * 50)
    print(f"Total open: {result.total_items}")
    for message in result.items:
        print(f"\n  📨 {message.subject} ({message.message_id})")
        print(f"     From: {message.name} <{message.email}>")
        print(f"     Received: {message.created_at}")
    print("\n" + "=" * 50)


def issue_token(user_id: str):
    """Print a moderator access token."""
    role = os.environ.get("MODERATOR_ROLE", "moderator")
    tokens = AuthService().create_access_token(user_id, roles=[role])
    print(tokens["access_token"])


def main():
    """Main function."""
    parser = argparse.ArgumentParser(
        description="Operate the Contact Intake messages table"
    )
    parser.add_argument(
        "--create-table",
        action="store_true",
        help="Create the messages table and its status index",
    )
    parser.add_argument(
        "--list-open",
        action="store_true",
        help="Show the first page of open messages",
    )
    parser.add_argument(
        "--issue-token",
        metavar="USER",
        help="Print a moderator access token for USER",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the table definition without creating it",
    )

    args = parser.parse_args()
    table_name = get_table_name()

    if args.create_table:
        create_table(table_name, dry_run=args.dry_run)
    elif args.list_open:
        list_open(table_name)
    elif args.issue_token:
        issue_token(args.issue_token)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
