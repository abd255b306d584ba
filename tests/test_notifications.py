"""Admin notification listing and read flags."""
import pytest

from coinhub.models.notification import NotificationKind
from coinhub.services import coins, notifications, topups
from coinhub.services.errors import NotFound


class TestNotifications:
    async def test_list_newest_first_with_unread_count(self, db, make_user):
        user = await make_user(balance=100)
        await topups.submit(db, user.id, 50, "r.jpg", "u")
        await coins.spend(db, user.id, 10)

        items, total, unread = await notifications.list_notifications(db)

        assert total == 2
        assert unread == 2
        assert [n.kind for n in items] == [NotificationKind.coin_redeem, NotificationKind.topup_request]

    async def test_mark_read_and_unread_filter(self, db, make_user):
        user = await make_user(balance=100)
        await topups.submit(db, user.id, 50, "r.jpg", "u")
        await coins.spend(db, user.id, 10)
        items, _, _ = await notifications.list_notifications(db)

        n = await notifications.mark_read(db, items[0].id)
        assert n.is_read is True

        items, total, unread = await notifications.list_notifications(db, unread_only=True)
        assert total == 1
        assert unread == 1
        assert items[0].kind == NotificationKind.topup_request

    async def test_mark_all_read(self, db, make_user):
        user = await make_user(balance=100)
        for _ in range(3):
            await coins.spend(db, user.id, 10)

        updated = await notifications.mark_all_read(db)

        assert updated == 3
        _, total, unread = await notifications.list_notifications(db, unread_only=True)
        assert (total, unread) == (0, 0)

    async def test_mark_read_unknown(self, db):
        with pytest.raises(NotFound):
            await notifications.mark_read(db, 31337)
