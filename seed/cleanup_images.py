#!/usr/bin/env python3
"""
Cleanup script to remove seeded images via API endpoints.

Images are found through search, so hidden images are not removed.

Run:
    poetry run python seed/cleanup_images.py \
      --api-id <API-ID> \
      --username <USERNAME> \
      --auth-token <TOKEN>
"""

import argparse
import sys
from typing import Any, cast

import requests
from aws_lambda_powertools import Logger

logger = Logger(service="cleanup")

BASE_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup seeded images via Image Share API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="API Gateway ID (LocalStack)",
    )
    parser.add_argument(
        "--username",
        required=True,
        help="User whose images should be deleted",
    )
    parser.add_argument(
        "--auth-token",
        required=True,
        help="Auth token of --username",
    )

    return parser.parse_args()


def cleanup_images() -> None:
    try:
        args = parse_args()

        base_url = BASE_API_URL.format(args.api_id)

        logger.info(
            "Starting cleanup process",
            extra={"api_base_url": base_url, "username": args.username},
        )

        response = requests.post(
            f"{base_url}/search",
            json={"uploader": args.username},
            timeout=30,
        )

        if not response.ok:
            logger.error(
                "Failed to search images",
                extra={"status": response.status_code, "response": response.text},
            )
            sys.exit(1)

        response_json = cast(dict[str, Any], response.json())
        images = cast(list[dict[str, Any]], response_json.get("results", []))

        if not images:
            logger.info("No images found for cleanup")
            return

        for image in images:
            image_name = image["image-name"]

            delete_resp = requests.post(
                f"{base_url}/delete",
                json={
                    "image-name": image_name,
                    "username": args.username,
                    "auth-token": args.auth_token,
                },
                timeout=30,
            )

            if delete_resp.ok:
                logger.info("Deleted image", extra={"image_name": image_name})
            else:
                logger.error(
                    "Failed to delete image",
                    extra={
                        "image_name": image_name,
                        "status": delete_resp.status_code,
                        "response": delete_resp.text,
                    },
                )

        logger.info("Cleanup completed successfully")

    except Exception as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    cleanup_images()
