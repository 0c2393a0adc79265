#!/usr/bin/env python3
"""
Basic usage examples for the dobject Python SDK.

This script walks through the common operations against a server:
- logging in and out
- creating, reading, updating and deleting objects
- payloads and ACLs
- searching
"""

import os
import tempfile

from dobject import DigitalObjectClient, DigitalObjectError, NotFoundError, payload

HOST = os.getenv("DOBJECT_HOST", "https://localhost:8443")
USERNAME = os.getenv("DOBJECT_USERNAME", "admin")
PASSWORD = os.getenv("DOBJECT_PASSWORD")


def object_example(client: DigitalObjectClient) -> None:
    """Create, update and delete a Document."""
    print("=== Object Example ===")

    obj = client.create_object({"name": "item1", "description": "x"}, "Document")
    print(f"Created {obj.id}")
    print(f"ACL: {client.acl_names(obj)}")

    obj = client.update_object(obj, "y", json_pointer="/description")
    print(f"Description is now: {obj.content['description']}")

    with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as f:
        f.write(b"Hello, payload!")
    try:
        obj = client.update_object(obj, payloads=payload(f.name, name="p1"))
    finally:
        os.unlink(f.name)
    print(f"Payloads: {obj.payload_names}")
    print(f"p1: {client.read_payload(obj, 'p1').decode()}")

    client.delete_object(obj)
    try:
        client.get_object(obj.id)
    except NotFoundError:
        print("Deleted")

    print()


def search_example(client: DigitalObjectClient) -> None:
    """Query for Documents."""
    print("=== Search Example ===")

    print(f"Documents: {client.count('type:Document')}")
    for obj in client.query("type:Document", page_size=5, sort_fields=["/name"]):
        print(f"  - {obj.id}: {obj.content.get('name')}")

    print()


def main():
    """Run all examples."""
    print("dobject Python SDK Examples")
    print("=" * 50)
    print()

    try:
        with DigitalObjectClient.login(HOST, USERNAME, PASSWORD, verify=False) as client:
            object_example(client)
            search_example(client)
    except DigitalObjectError as e:
        print(f"Example failed: {e}")


if __name__ == "__main__":
    main()
