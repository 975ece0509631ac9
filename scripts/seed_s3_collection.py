"""Upload local collection files to S3 for the S3 collection source.

Usage:
    python scripts/seed_s3_collection.py --endpoint-url http://localhost:4566
    python scripts/seed_s3_collection.py --data-dir ./data --bucket my-bucket --prefix demo/
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import boto3

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
SUFFIXES = (".json", ".jsonl")


def ensure_bucket(s3: Any, bucket: str, region: str = "us-east-1") -> None:
    """Create the bucket. Skips if it already exists."""
    existing = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
    if bucket in existing:
        print(f"  Bucket {bucket} already exists, skipping")
        return
    kwargs: dict[str, Any] = {"Bucket": bucket}
    if region != "us-east-1":
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    s3.create_bucket(**kwargs)
    print(f"  Created bucket {bucket}")


def upload_collections(s3: Any, bucket: str, data_dir: Path = DEFAULT_DATA_DIR,
                       prefix: str = "") -> list[str]:
    """Upload every <name>.json / <name>.jsonl in ``data_dir``. Returns the keys written."""
    keys: list[str] = []
    for path in sorted(data_dir.iterdir()):
        if not path.is_file() or path.suffix not in SUFFIXES:
            continue
        key = f"{prefix}{path.name}"
        s3.put_object(
            Bucket=bucket, Key=key, Body=path.read_bytes(), ContentType="application/json",
        )
        keys.append(key)
        print(f"  Uploaded {path.name} -> s3://{bucket}/{key}")
    return keys


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed S3 with docpipe collections")
    parser.add_argument("--endpoint-url", default=None, help="S3 endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--bucket", default="docpipe-collections", help="Target bucket")
    parser.add_argument("--prefix", default="", help="Key prefix (e.g. demo/)")
    parser.add_argument("--data-dir", default=str(DEFAULT_DATA_DIR), help="Directory of collection files")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    s3 = boto3.client("s3", **kwargs)

    print("Creating bucket...")
    ensure_bucket(s3, args.bucket, region=args.region)

    print("Uploading collections...")
    upload_collections(s3, args.bucket, Path(args.data_dir), prefix=args.prefix)

    print("Done!")


if __name__ == "__main__":
    main()
