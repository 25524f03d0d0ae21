"""Unit tests for NodeApplication and build_applications."""

import dataclasses

import pytest

from rmsim.app.application import NodeApplication, build_applications
from rmsim.core.config import ConfigError
from rmsim.core.messages import MessageType
from rmsim.core.roles import Role


class TestBuildApplications:
    """Tests for the application factory."""

    def test_one_application_per_address(self, scenario_config, clock, transport, events):
        apps = build_applications(scenario_config, clock, transport, events)
        assert sorted(apps) == list(range(10))
        assert all(isinstance(app, NodeApplication) for app in apps.values())
        assert all(app.address == a for a, app in apps.items())

    def test_roles_shared_across_nodes(self, scenario_config, clock, transport, events):
        apps = build_applications(scenario_config, clock, transport, events)
        roles = {id(app.roles) for app in apps.values()}
        assert len(roles) == 1

        counts = {role: 0 for role in Role}
        for app in apps.values():
            counts[app.role] += 1
        assert counts == {Role.SERVER: 2, Role.RESOURCE_HOG: 2, Role.PLAIN_CLIENT: 6}

    def test_buffer_sized_by_role(self, scenario_config, clock, transport, events):
        apps = build_applications(scenario_config, clock, transport, events)
        for app in apps.values():
            expected = 1000 if app.role is Role.SERVER else 100
            assert app.buffer.max_size == expected

    def test_buffers_are_independent(self, scenario_config, clock, transport, events, msg):
        apps = build_applications(scenario_config, clock, transport, events)
        apps[0].buffer.admit(1, msg("a", 10), owner=0)

        assert len(apps[0].buffer) == 1
        assert all(len(app.buffer) == 0 for a, app in apps.items() if a != 0)

    def test_each_node_has_own_random_stream(self, scenario_config, clock, transport, events):
        apps = build_applications(scenario_config, clock, transport, events)
        draws = {a: int(app.rng.integers(0, 2**31)) for a, app in apps.items()}
        assert len(set(draws.values())) > 1
        assert apps[0].rng is not apps[1].rng

    @pytest.mark.parametrize(
        "changes",
        [{"seed": -5}, {"dest_min": -5, "dest_max": 5}],
        ids=["negative-seed", "negative-addresses"],
    )
    def test_negative_seed_and_addresses_accepted(
        self, scenario_config, clock, transport, events, changes
    ):
        config = dataclasses.replace(scenario_config, **changes)
        apps = build_applications(config, clock, transport, events)

        assert sorted(apps) == list(config.addresses())
        for app in apps.values():
            assert 0 <= int(app.rng.integers(0, 100)) < 100

    def test_negative_seed_replays_identically(self, scenario_config, clock, transport, events):
        config = dataclasses.replace(scenario_config, seed=-7)
        first = build_applications(config, clock, transport, events)
        second = build_applications(config, clock, transport, events)

        assert first[0].roles == second[0].roles
        assert [int(a.rng.integers(0, 2**31)) for a in first.values()] == [
            int(a.rng.integers(0, 2**31)) for a in second.values()
        ]

    def test_invalid_config_rejected(self, scenario_config, clock, transport, events):
        config = dataclasses.replace(
            scenario_config, percentage_of_servers=50, percentage_of_res_hogs=50
        )
        with pytest.raises(ConfigError):
            build_applications(config, clock, transport, events)


class TestNodeApplication:
    """Tests for the per-node facade."""

    def test_three_transit_messages_on_client(self, scenario_config, clock, transport, events, msg):
        apps = build_applications(scenario_config, clock, transport, events)
        roles = apps[0].roles
        client = apps[roles.clients[0]]
        sources = [a for a in roles.clients if a != client.address][:3]
        target = roles.servers[0]

        messages = [
            msg(f"u{i}", 60, receive_time=float(i), source=s, destination=target)
            for i, s in enumerate(sources)
        ]

        client.handle(messages[0])
        assert client.buffer.total_usage() == 60

        client.handle(messages[1])
        assert client.buffer.total_usage() <= 100
        assert messages[1].id in client.buffer
        assert messages[0].id not in client.buffer

        client.handle(messages[2])
        assert client.buffer.total_usage() <= 100
        assert messages[2].id in client.buffer
        assert messages[1].id not in client.buffer

    def test_remove_forwards_to_buffer(self, scenario_config, clock, transport, events, msg):
        apps = build_applications(scenario_config, clock, transport, events)
        app = apps[4]
        app.handle(msg("t", 10, source=1, destination=9, msg_type=MessageType.REQUEST))

        assert app.remove("t") is True
        assert app.remove("t") is False
        assert len(app.buffer) == 0

    def test_update_sends_when_due(self, scenario_config, clock, transport, events):
        apps = build_applications(scenario_config, clock, transport, events)
        clock.time = 10.0
        sent = [app.update() for app in apps.values()]

        assert all(m is not None for m in sent)
        assert len(transport.sent) == 10
