"""Grant a role to an existing account.

Usage: python bin/grant-role.py <username> [ROLE]

ROLE defaults to ADMIN. Roles cannot be changed over HTTP; this script is
the only way to promote an account.
"""

import asyncio
import sys

from shared.auth.models import Role
from shared.auth.password import get_hasher
from shared.auth.service import AccountService
from shared.auth.settings import AuthSettings
from shared.db import Database, SqliteAccountRepository, SqliteGameRepository
from shared.errors import NotFoundError
from shared.games import GameService


async def main() -> None:
    if len(sys.argv) not in {2, 3}:
        print(f"Usage: {sys.argv[0]} <username> [{'|'.join(Role)}]")
        sys.exit(1)

    username = sys.argv[1]
    try:
        role = Role(sys.argv[2].upper()) if len(sys.argv) == 3 else Role.ADMIN
    except ValueError:
        print(f"Error: unknown role {sys.argv[2]!r}")
        sys.exit(1)

    auth_settings = AuthSettings()
    db = Database(auth_settings.database_path)
    db.connect()

    try:
        account_service = AccountService(
            SqliteAccountRepository(db),
            GameService(SqliteGameRepository(db)),
            password_hasher=get_hasher(auth_settings.password_hasher),
        )

        try:
            account = await account_service.grant_role(username, role)
        except NotFoundError as e:
            print(f"Error: {e}")
            sys.exit(1)

        roles = ", ".join(sorted(account.roles))
        print(f"Account {account.username} (id: {account.account_id}) now has roles: {roles}")
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(main())
