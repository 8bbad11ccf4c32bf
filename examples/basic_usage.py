#!/usr/bin/env python3
"""
Basic clusterauth usage example.

Walks through activation, access control and delegated tokens against the
in-memory FakeAuthService, so no cluster is needed.
Run with: python examples/basic_usage.py
"""

from clusterauth import (
    ClusterAuthClient,
    ClusterAuthError,
    MemoryCredentialStore,
    PermissionDeniedError,
    Scope,
    parse_scope,
)
from clusterauth.testing import FakeAuthService, ScriptedPrompter

print("=== clusterauth Basic Usage Example ===\n")

service = FakeAuthService(default_ttl=3600)
store = MemoryCredentialStore()
prompter = ScriptedPrompter()
client = ClusterAuthClient(
    credential_store=store,
    prompter=prompter,
    http_transport=service.as_transport(),
)

# 1. Activate with a robot admin
print("1. Activating auth with a robot admin...")
result = client.session.activate("robot:ci")
print(f"   Root token belongs to {result.initial_admin}")
print(f"   Root robot token: {result.is_root_robot_token}")
print(f"   whoami: {client.session.whoami().username}\n")

# 2. Scopes are ordered
print("2. Comparing scopes...")
print(f"   writer >= reader: {parse_scope('writer') >= Scope.READER}")
try:
    parse_scope("Reader")
except ClusterAuthError as e:
    print(f"   Rejected: {e.message}")
print()

# 3. Grant and check access
print("3. Granting alice writer access to 'images'...")
client.authorization.set_scope("alice", Scope.WRITER, "images")
for grant in client.authorization.get_acl("images"):
    print(f"   {grant.username}: {grant.scope}")
print()

# 4. Delegate a token to alice and act as her
print("4. Acting as alice with a delegated token...")
delegated = client.authorization.get_auth_token("alice")
client.session.use_delegated_token(delegated.token)
print(f"   whoami: {client.session.whoami().username}")
print(f"   can read images: {client.authorization.check(Scope.READER, 'images')}")
print(f"   owns images: {client.authorization.check(Scope.OWNER, 'images')}")
try:
    client.authorization.modify_admins(add=["alice"])
except PermissionDeniedError as e:
    print(f"   modify-admins denied: {e.message}")
print()

# 5. Log out
print("5. Logging out...")
client.session.logout()
print(f"   stored credential: {store.read()}")

client.close()
print("\n=== Done ===")
