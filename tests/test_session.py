"""Tests for AppSession wiring."""

from pokeinventory.changes import ChangeFeed
from pokeinventory.session import AppSession


class TestAppSession:
    def test_start_opens_every_read_model(self, session_factory):
        with AppSession(session_factory) as app:
            app.start()

            assert app.feed.running is True
            assert app.poller is None
            assert all(model.is_open for model in app.dashboard.sources)
            assert app.feed.subscriber_count() == 3

    def test_close_releases_everything(self, session_factory):
        app = AppSession(session_factory)
        app.start(poll=True, interval=0.01)

        app.close()

        assert app.feed.running is False
        assert app.feed.subscriber_count() == 0
        assert app.poller is None
        assert not any(model.is_open for model in app.dashboard.sources)

    def test_sessions_share_nothing(self, session_factory):
        first = AppSession(session_factory)
        second = AppSession(session_factory)

        assert first.feed is not second.feed
        assert first.inventory is not second.inventory

        first.close()
        second.close()

    def test_external_feed(self, session_factory):
        feed = ChangeFeed()

        with AppSession(session_factory, feed=feed) as app:
            assert app.store.feed is feed

    def test_decrement_attempts_passed_through(self, session_factory):
        with AppSession(session_factory, decrement_attempts=5) as app:
            assert app.sale_recording.attempts == 5
