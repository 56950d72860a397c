import asyncio

from bot import notifications


class FakeChannel:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send(self, **kwargs):
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError('channel gone')
        self.sent.append(kwargs)


def _deliver(channel, **kwargs):
    async def scenario():
        notifications._send(channel, **kwargs)
        pending = set(notifications._pending_sends)
        assert len(pending) == 1
        await asyncio.wait(pending)
        await asyncio.sleep(0)
    asyncio.run(scenario())


def test_sends_are_held_until_delivered():
    channel = FakeChannel()
    _deliver(channel, content='ready')
    assert channel.sent == [{'content': 'ready'}]
    assert notifications._pending_sends == set()


def test_failed_send_is_logged_and_released(caplog):
    _deliver(FakeChannel(fail=True), content='ready')
    assert notifications._pending_sends == set()
    assert 'Failed to deliver notification' in caplog.text
