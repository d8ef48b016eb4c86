from __future__ import annotations

import os
import uuid

import boto3

from ddbexpr_py import (
    Condition,
    ConditionSet,
    SetValue,
    UpdateAction,
    build_condition_params,
    build_key_condition_params,
    build_update_params,
    to_client_params,
)


def _client():
    return boto3.client(
        "dynamodb",
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
        region_name=os.environ.get("AWS_REGION", "us-east-1"),
        aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID", "dummy"),
        aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY", "dummy"),
    )


def main() -> None:
    client = _client()
    table_name = f"ddbexpr_py_example_{uuid.uuid4().hex[:12]}"

    client.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}, {"AttributeName": "sk", "KeyType": "RANGE"}],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)

    try:
        params: dict = {
            "TableName": table_name,
            "Key": {"pk": {"S": "A"}, "sk": {"S": "001"}},
            "ReturnValues": "ALL_NEW",
        }
        build_update_params(
            {
                "title": "first",
                "visits": UpdateAction.add(1),
                "tags": UpdateAction.set(SetValue.append(SetValue.if_not_exists("tags", []), ["new"])),
            },
            params=params,
        )
        build_condition_params(
            ConditionSet.or_(
                {"visits": Condition.attribute_not_exists()},
                {"visits": Condition.lt(100)},
            ),
            params=params,
        )
        print("update:", params["UpdateExpression"], params["ConditionExpression"])
        print("item:", client.update_item(**to_client_params(params))["Attributes"])

        query = build_key_condition_params(
            {"pk": "A", "sk": Condition.begins_with("0")},
            params={"TableName": table_name},
        )
        print("query:", client.query(**to_client_params(query))["Items"])
    finally:
        client.delete_table(TableName=table_name)


if __name__ == "__main__":
    main()
