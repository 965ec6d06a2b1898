#!/usr/bin/env python3
"""
Seed script to populate the system via API endpoints.

Every image file in the given directory is inserted under its file name,
with the file extension as image format.

Run:
    poetry run python seed/seed_images.py \
      --api-id <API-ID> \
      --images-dir <DIR> \
      --username alice --auth-token <TOKEN> [--register]
"""

import argparse
import base64
import sys
from pathlib import Path
from typing import Any, cast

import requests
from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_auth import DynamoDBAuthGateway

logger = Logger(service="seed")


BASE_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1"

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".ico"}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via Image Share API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="Base API ID (e.g. LocalStack API Gateway ID)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        required=True,
        help="Directory holding the image files to upload",
    )
    parser.add_argument(
        "--username",
        default=None,
        help="Upload as this user (anonymous when omitted)",
    )
    parser.add_argument(
        "--auth-token",
        default=None,
        help="Auth token of --username",
    )
    parser.add_argument(
        "--register",
        action="store_true",
        help="Store --auth-token for --username in the auth token table first",
    )
    parser.add_argument(
        "--client-name",
        default="seed-script",
        help="Client name recorded with every image",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=4,
        help="Number of images to seed",
    )

    return parser.parse_args()


def seed_images() -> None:
    try:
        args = parse_args()

        if args.register:
            if not args.username or not args.auth_token:
                logger.error("--register needs both --username and --auth-token")
                sys.exit(2)
            DynamoDBAuthGateway().store_token(username=args.username, token=args.auth_token)

        files = sorted(
            path for path in args.images_dir.iterdir() if path.suffix.lower() in IMAGE_SUFFIXES
        )

        insert_url = f"{BASE_API_URL.format(args.api_id)}/insert"

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": insert_url, "files": len(files)},
        )

        for image_path in files[: args.limit]:
            encoded_file = base64.b64encode(image_path.read_bytes()).decode("utf-8")

            payload: dict[str, Any] = {
                "image": encoded_file,
                "image-name": image_path.stem,
                "image-format": image_path.suffix.lstrip(".").lower(),
                "client-name": args.client_name,
            }
            if args.username and args.auth_token:
                payload["username"] = args.username
                payload["auth-token"] = args.auth_token

            response = requests.post(insert_url, json=payload, timeout=30)
            response_json = cast(dict[str, Any], response.json())

            if response_json.get("success"):
                logger.info(
                    "Seeded image",
                    extra={
                        "image": image_path.name,
                        "status": response_json.get("status-simple"),
                        "image_name": response_json.get("image-name"),
                    },
                )
            else:
                logger.error(
                    "Failed to seed image",
                    extra={
                        "image": image_path.name,
                        "status": response.status_code,
                        "response": response_json,
                    },
                )

        logger.info("Seeding completed")

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
