from match3.events.bus import EventBus


def test_event_bus_delivers_to_every_subscriber_with_bus_as_sender():
    bus = EventBus()
    received = []

    def first(sender, **kwargs):
        received.append(("first", sender, kwargs))

    def second(sender, **kwargs):
        received.append(("second", sender, kwargs))

    bus.subscribe("test", first)
    bus.subscribe("test", second)
    bus.emit("test", value=42, msg="hello")

    assert sorted(name for name, _, _ in received) == ["first", "second"]
    assert all(sender is bus for _, sender, _ in received)
    assert all(kwargs == {"value": 42, "msg": "hello"} for _, _, kwargs in received)


def test_event_bus_keeps_local_handlers_alive():
    bus = EventBus()
    calls = []

    class Listener:
        def on_event(self, sender, **kwargs):
            calls.append(kwargs["value"])

    bus.subscribe("test", Listener().on_event)
    bus.emit("test", value=7)
    assert calls == [7]


def test_event_bus_unsubscribe_and_unknown_event():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    bus.subscribe("test", handler)
    bus.unsubscribe("test", handler)
    bus.emit("test", value=1)
    bus.emit("never_subscribed", value=2)
    assert calls == []
