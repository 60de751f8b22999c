"""
Password Login Example - Log in, export a persistance token, resume, sign out.

Reads MESH_API_URL, MESH_AUTH_URL and MESH_CLIENT_ID from the environment.
"""

import os

from mesh_session import BlockingMeshClient, MeshClient
from mesh_session.errors import AuthenticationError


def main():
    username = os.environ.get("MESH_USERNAME", "alice")
    password = os.environ.get("MESH_PASSWORD", "s3cret")

    with BlockingMeshClient(MeshClient.from_env()) as client:
        # Login
        authentication_id = client.login_with_password(username, password)
        print(f"Logged in as {username}")
        print(f"Authentication ID: {authentication_id[:12]}...")
        print(f"State: {client.state.value}")

        # Keep the session for a later run
        persistance_token = client.retrieve_persistance_token()
        print(f"\nPersistance token exported ({len(persistance_token)} chars)")

        # Refresh in place
        refreshed_id = client.refresh()
        print(f"Refreshed, same id: {refreshed_id == authentication_id}")

        # Resuming from the new token works
        resumed_token = client.retrieve_persistance_token()
        client.login_with_persistance(resumed_token)
        print(f"\nResumed session: {client.authentication_id[:12]}...")

        # Logout
        client.signout()
        print(f"State after signout: {client.state.value}")

        # Tokens exported before signout are revoked
        try:
            client.login_with_persistance(resumed_token)
        except AuthenticationError as e:
            print(f"Persistance token after signout rejected: {e.message}")


if __name__ == "__main__":
    main()
