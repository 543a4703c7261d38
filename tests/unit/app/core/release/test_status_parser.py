"""Tests for the deployment status report parser."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from helmi.app.core.release.status_parser import StatusParser, parse_status

DEPLOYED_AT = datetime(2018, 1, 8, 10, 37, 33)


def _table(rows: list[list[str]], width: int = 16) -> str:
    """Render rows as a fixed-width table, like the deployment tool does."""
    return "\n".join("".join(cell.ljust(width) for cell in row).rstrip() for row in rows)


def _report(*blocks: str, header: str | None = None) -> str:
    if header is None:
        header = (
            "LAST DEPLOYED: Mon Jan  8 10:37:33 2018\n"
            "NAMESPACE: default\n"
            "STATUS: DEPLOYED"
        )
    return "\n\n".join([header, *blocks]) + "\n"


SERVICE_BLOCK = "==> v1/Service\n" + _table(
    [
        ["NAME", "TYPE", "CLUSTER-IP", "EXTERNAL-IP", "PORT(S)", "AGE"],
        ["helmi-mariadb", "NodePort", "10.0.0.206", "<none>", "3306:31565/TCP", "5s"],
        ["helmi-metrics", "ClusterIP", "10.0.0.207", "<none>", "9104/TCP", "5s"],
    ]
)

DEPLOYMENT_BLOCK = "==> v1beta1/Deployment\n" + _table(
    [
        ["NAME", "DESIRED", "CURRENT", "UP-TO-DATE", "AVAILABLE", "AGE"],
        ["helmi-mariadb", "2", "2", "2", "1", "5s"],
    ]
)

STATEFULSET_BLOCK = "==> v1beta1/StatefulSet\n" + _table(
    [
        ["NAME", "DESIRED", "CURRENT", "AGE"],
        ["helmi-db", "3", "3", "5s"],
    ]
)


class TestHeaderFields:
    """Tests for the report header lines."""

    def test_reads_namespace_and_deployed_flag(self) -> None:
        status = parse_status(_report(), now=DEPLOYED_AT)

        assert status.namespace == "default"
        assert status.is_deployed
        assert not status.is_failed

    def test_reads_last_deployed_timestamp(self) -> None:
        status = parse_status(_report(), now=DEPLOYED_AT)

        assert status.last_deployed_at == DEPLOYED_AT

    def test_failed_status_line_marks_failure(self) -> None:
        header = "NAMESPACE: default\nSTATUS: FAILED"
        status = parse_status(_report(header=header), now=DEPLOYED_AT)

        assert status.is_failed
        assert not status.is_deployed

    def test_unparseable_timestamp_falls_back_to_zero(self) -> None:
        header = "LAST DEPLOYED: yesterday afternoon\nSTATUS: DEPLOYED"
        status = parse_status(_report(header=header), now=DEPLOYED_AT)

        assert status.last_deployed_at == datetime.min

    def test_name_is_passed_through(self) -> None:
        status = parse_status(_report(), name="helmi1234", now=DEPLOYED_AT)

        assert status.name == "helmi1234"


class TestReplicaCounts:
    """Tests for DESIRED/CURRENT/AVAILABLE column parsing."""

    def test_available_column_overrides_current(self) -> None:
        status = parse_status(_report(DEPLOYMENT_BLOCK), now=DEPLOYED_AT)

        assert status.desired_nodes == 2
        assert status.available_nodes == 1

    def test_current_counts_as_available_without_available_column(self) -> None:
        status = parse_status(_report(STATEFULSET_BLOCK), now=DEPLOYED_AT)

        assert status.desired_nodes == 3
        assert status.available_nodes == 3

    def test_counts_are_summed_across_blocks(self) -> None:
        status = parse_status(
            _report(SERVICE_BLOCK, DEPLOYMENT_BLOCK, STATEFULSET_BLOCK),
            now=DEPLOYED_AT,
        )

        assert status.desired_nodes == 5
        assert status.available_nodes == 4

    def test_available_column_does_not_leak_into_next_block(self) -> None:
        # "0" sits where the previous block's AVAILABLE column was
        statefulset = "==> v1beta1/StatefulSet\n" + _table(
            [
                ["NAME", "DESIRED", "CURRENT", "AGE", "REVISION"],
                ["helmi-db", "3", "3", "5s", "0"],
            ]
        )
        status = parse_status(_report(DEPLOYMENT_BLOCK, statefulset), now=DEPLOYED_AT)

        assert status.available_nodes == 1 + 3

    def test_non_numeric_cells_are_ignored(self) -> None:
        block = "==> v1beta1/Deployment\n" + _table(
            [
                ["NAME", "DESIRED", "CURRENT", "AVAILABLE"],
                ["helmi-a", "two", "1", "<none>"],
                ["helmi-b", "1", "1", "1"],
            ]
        )
        status = parse_status(_report(block), now=DEPLOYED_AT)

        assert status.desired_nodes == 1
        assert status.available_nodes == 2

    def test_short_data_lines_are_ignored(self) -> None:
        block = "==> v1beta1/Deployment\n" + _table(
            [["NAME", "DESIRED", "CURRENT"], ["x"]]
        )
        status = parse_status(_report(block), now=DEPLOYED_AT)

        assert status.desired_nodes == 0
        assert status.available_nodes == 0


class TestPorts:
    """Tests for PORT(S) column parsing."""

    def test_node_port_mapping(self) -> None:
        block = "==> v1/Service\n" + _table(
            [["NAME", "PORT(S)"], ["helmi-web", "80:30001/TCP"]]
        )
        status = parse_status(_report(block), now=DEPLOYED_AT)

        assert status.node_ports[80] == 30001
        assert 80 in status.cluster_ports

    def test_cluster_only_port(self) -> None:
        status = parse_status(_report(SERVICE_BLOCK), now=DEPLOYED_AT)

        assert 9104 in status.cluster_ports
        assert 9104 not in status.node_ports
        assert status.node_ports == {3306: 31565}

    def test_comma_separated_entries(self) -> None:
        block = "==> v1/Service\n" + _table(
            [["NAME", "PORT(S)"], ["helmi-web", "80:30001/TCP,443:30443/TCP,53/UDP"]],
            width=12,
        )
        status = parse_status(_report(block), now=DEPLOYED_AT)

        assert status.node_ports == {80: 30001, 443: 30443}
        assert status.cluster_ports == {80, 443, 53}

    def test_malformed_entries_are_skipped(self) -> None:
        block = "==> v1/Service\n" + _table(
            [["NAME", "PORT(S)"], ["helmi-web", "http:30001/TCP,8080/TCP"]]
        )
        status = parse_status(_report(block), now=DEPLOYED_AT)

        assert status.node_ports == {}
        assert status.cluster_ports == {8080}


class TestStaleness:
    """Tests for the stuck rollout classification."""

    def test_stale_underprovisioned_release_is_failed(self) -> None:
        status = parse_status(
            _report(DEPLOYMENT_BLOCK), now=DEPLOYED_AT + timedelta(hours=1)
        )

        assert status.available_nodes < status.desired_nodes
        assert status.is_failed

    def test_recent_underprovisioned_release_is_not_failed(self) -> None:
        status = parse_status(
            _report(DEPLOYMENT_BLOCK), now=DEPLOYED_AT + timedelta(minutes=5)
        )

        assert not status.is_failed

    def test_timeout_is_configurable(self) -> None:
        parser = StatusParser(
            timeout=timedelta(minutes=2),
            clock=lambda: DEPLOYED_AT + timedelta(minutes=5),
        )

        assert parser.parse(_report(DEPLOYMENT_BLOCK)).is_failed

    def test_fully_available_release_never_goes_stale(self) -> None:
        status = parse_status(
            _report(STATEFULSET_BLOCK), now=DEPLOYED_AT + timedelta(days=30)
        )

        assert not status.is_failed

    def test_missing_timestamp_counts_as_very_old(self) -> None:
        header = "NAMESPACE: default\nSTATUS: DEPLOYED"
        status = parse_status(_report(DEPLOYMENT_BLOCK, header=header))

        assert status.is_failed


@pytest.mark.parametrize("raw", ["", "\n\n\n", "garbage\nmore garbage"])
def test_unstructured_input_yields_defaults(raw: str) -> None:
    status = parse_status(raw, now=DEPLOYED_AT)

    assert status.desired_nodes == 0
    assert status.available_nodes == 0
    assert status.node_ports == {}
    assert not status.is_failed
    assert not status.is_deployed
