import argparse
import asyncio
from sqlalchemy import select
from coinhub.core.db import AsyncSessionLocal
from coinhub.core.security import hash_password
from coinhub.models.user import User
from coinhub.services.audit import audit_ledger


async def create_user(email: str, password: str, first_name: str, last_name: str = "", role: str = "user"):
    email = email.strip().lower()
    async with AsyncSessionLocal() as db:
        q = await db.execute(select(User).where(User.email == email))
        if q.scalar_one_or_none():
            raise SystemExit("User already exists")
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
            balance=0,
            role=role,
        )
        db.add(user)
        await db.commit()
        print(f"Created {role}:", email, f"(id={user.id})")


async def run_audit(user_id: int | None = None, batch_size: int = 500) -> int:
    async with AsyncSessionLocal() as db:
        stats = await audit_ledger(db, user_id=user_id, batch_size=batch_size)
    for p in stats.problems:
        print("[MISMATCH]", p)
    print(
        f"[LEDGER-AUDIT] users={stats.scanned_users} transactions={stats.scanned_transactions} "
        f"mismatched_users={stats.mismatched_users}"
    )
    return 0 if stats.ok else 1


def main():
    parser = argparse.ArgumentParser(prog="coinhub")
    sub = parser.add_subparsers(dest="cmd")

    for name in ("create-admin", "create-user"):
        c = sub.add_parser(name)
        c.add_argument("--email", required=True)
        c.add_argument("--password", required=True)
        c.add_argument("--first-name", required=True)
        c.add_argument("--last-name", default="")

    a = sub.add_parser("audit-ledger")
    a.add_argument("--user-id", type=int, default=None)
    a.add_argument("--batch-size", type=int, default=500)

    args = parser.parse_args()
    if args.cmd in ("create-admin", "create-user"):
        role = "admin" if args.cmd == "create-admin" else "user"
        asyncio.run(create_user(args.email, args.password, args.first_name, args.last_name, role=role))
    elif args.cmd == "audit-ledger":
        raise SystemExit(asyncio.run(run_audit(user_id=args.user_id, batch_size=args.batch_size)))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
