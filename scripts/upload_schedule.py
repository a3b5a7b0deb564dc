import argparse
import json
import sys

import boto3

from lambdas.action_gym.data_access import ScheduleLoadError, load_schedule


def upload_schedule(bucket: str, schedule_file: str, key: str, s3=None) -> str:
    # Same rules the webhook applies at cold start
    store = load_schedule(schedule_file)
    with open(schedule_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    body = json.dumps(data).encode("utf-8")

    s3 = s3 or boto3.client("s3")
    s3.put_object(Bucket=bucket, Key=key, Body=body, ContentType="application/json")
    print(f"Uploaded {len(store)} classes from {schedule_file} to s3://{bucket}/{key}")
    return key


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate a class schedule JSON and upload it to S3")
    parser.add_argument("bucket", help="Target S3 bucket name (S3_BUCKET_DATA)")
    parser.add_argument("schedule_file", help="Path to schedule.json")
    parser.add_argument("--key", default="data/schedule.json", help="Object key (S3_SCHEDULE_KEY)")
    args = parser.parse_args(argv)

    try:
        upload_schedule(args.bucket, args.schedule_file, args.key)
    except ScheduleLoadError as e:
        print(f"Refusing to upload: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
