from prometheus_client.parser import text_string_to_metric_families

from osinfo.exposition import build_registry, render_latest
from osinfo.telemetry import RequestTelemetry


def samples(telemetry):
    content, _ = render_latest(build_registry(telemetry))
    found = {}
    for family in text_string_to_metric_families(content.decode("utf-8")):
        for sample in family.samples:
            found[(sample.name, tuple(sorted(sample.labels.items())))] = sample.value
    return found


def test_exposes_request_counters():
    telemetry = RequestTelemetry()
    telemetry.record(200, 10)
    telemetry.record(200, 30)
    telemetry.record(500, 5)

    found = samples(telemetry)
    assert found[("osinfo_http_requests_total", ())] == 3
    assert found[("osinfo_http_request_duration_milliseconds_total", ())] == 45
    assert found[("osinfo_http_responses_total", (("status_code", "200"),))] == 2
    assert found[("osinfo_http_responses_total", (("status_code", "500"),))] == 1
    assert found[("osinfo_http_response_time_average_milliseconds", ())] == 15.0


def test_exposes_start_time_and_uptime():
    telemetry = RequestTelemetry()
    found = samples(telemetry)
    assert found[("osinfo_server_start_time_seconds", ())] == telemetry.started_at.timestamp()
    assert found[("osinfo_server_uptime_seconds", ())] >= 0


def test_content_type_is_prometheus_text():
    _, content_type = render_latest(build_registry(RequestTelemetry()))
    assert content_type.startswith("text/plain")


def test_registries_do_not_share_state():
    first, second = RequestTelemetry(), RequestTelemetry()
    first.record(200, 1)
    assert samples(second)[("osinfo_http_requests_total", ())] == 0
