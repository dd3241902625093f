import argparse
import sys
from typing import Optional

import requests


def fail(message: str) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)
    sys.exit(1)


def build_query(
    permission_id: Optional[str] = None,
    file_id: Optional[str] = None,
    user_id: Optional[str] = None,
    role: Optional[str] = None,
) -> dict:
    query = {"id": permission_id, "fileID": file_id, "userID": user_id, "role": role}
    return {key: value for key, value in query.items() if value is not None}


def request(method: str, url: str, timeout: float, **kwargs) -> requests.Response:
    try:
        return requests.request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as e:
        fail(f"Could not reach permission service at {url}: {e}")


def check_health(service_url: str, timeout: float = 3.0) -> None:
    """
    Call GET {service_url}/health and fail if it's not SERVING.
    """
    health_url = f"{service_url.rstrip('/')}/health"
    resp = request("GET", health_url, timeout)
    if resp.status_code != 200:
        fail(f"Health check failed ({resp.status_code}): {resp.text}")

    print(f"[OK] Permission service at {service_url} is {resp.json()['status']}.")


def create_permission(service_url: str, file_id: str, user_id: str, role: str, timeout: float = 10.0) -> dict:
    """
    POST /permissions, creating the permission or updating its role.
    """
    url = f"{service_url.rstrip('/')}/permissions"
    payload = {"fileID": file_id, "userID": user_id, "role": role}

    resp = request("POST", url, timeout, json=payload)
    if resp.status_code not in (200, 201):
        fail(f"Failed to create permission ({resp.status_code}): {resp.text}")
    return resp.json()


def get_permission(service_url: str, query: dict, timeout: float = 10.0) -> Optional[dict]:
    url = f"{service_url.rstrip('/')}/permissions/one"
    resp = request("GET", url, timeout, params=query)
    if resp.status_code == 404:
        return None
    if resp.status_code != 200:
        fail(f"Failed to get permission ({resp.status_code}): {resp.text}")
    return resp.json()


def list_permissions(service_url: str, query: dict, timeout: float = 10.0) -> list:
    url = f"{service_url.rstrip('/')}/permissions"
    resp = request("GET", url, timeout, params=query)
    if resp.status_code != 200:
        fail(f"Failed to list permissions ({resp.status_code}): {resp.text}")
    return resp.json()


def delete_permission(service_url: str, query: dict, timeout: float = 10.0) -> Optional[dict]:
    url = f"{service_url.rstrip('/')}/permissions"
    resp = request("DELETE", url, timeout, params=query)
    if resp.status_code == 404:
        return None
    if resp.status_code != 200:
        fail(f"Failed to delete permission ({resp.status_code}): {resp.text}")
    return resp.json()


def format_permission(permission: dict) -> str:
    return f"{permission['id']}  file={permission['fileID']}  user={permission['userID']}  role={permission['role']}"


def add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--id", dest="permission_id", help="Permission id.")
    parser.add_argument("--file-id", help="Match permissions on this file.")
    parser.add_argument("--user-id", help="Match permissions of this user.")
    parser.add_argument("--role", help="Match permissions with this role.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage file permissions through the permission service.")
    parser.add_argument(
        "--service-url",
        default="http://localhost:8080",
        help="Base URL of the permission service (default: http://localhost:8080)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check that the service and its store are healthy.")

    create = subparsers.add_parser("create", help="Grant a role on a file to a user.")
    create.add_argument("--file-id", required=True)
    create.add_argument("--user-id", required=True)
    create.add_argument("--role", required=True, help="Role to grant (e.g. READ, WRITE).")

    for name, help_text in (
        ("get", "Show the first permission matching the filter."),
        ("list", "List every permission matching the filter."),
        ("delete", "Delete the first permission matching the filter."),
    ):
        add_filter_arguments(subparsers.add_parser(name, help=help_text))

    return parser


def main(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "health":
        check_health(args.service_url)
        return

    if args.command == "create":
        permission = create_permission(args.service_url, args.file_id, args.user_id, args.role)
        print(f"[OK] {format_permission(permission)}")
        return

    query = build_query(args.permission_id, args.file_id, args.user_id, args.role)

    if args.command == "list":
        for permission in list_permissions(args.service_url, query):
            print(format_permission(permission))
        return

    if args.command == "get":
        permission = get_permission(args.service_url, query)
    else:
        if not query:
            fail("delete needs at least one of --id, --file-id, --user-id, --role")
        permission = delete_permission(args.service_url, query)

    if permission is None:
        fail("Permission not found")
    print(format_permission(permission))


if __name__ == "__main__":
    main()


# Script run command
# python permission_cli.py --service-url http://localhost:8080 \
#   create --file-id f1 --user-id u1 --role READ
