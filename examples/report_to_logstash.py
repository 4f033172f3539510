"""Report a few application metrics to a local Logstash UDP input.

Pair it with a Logstash pipeline such as:

    input { udp { port => 1984 codec => json } }
    output { stdout { codec => rubydebug } }

Run with ``python examples/report_to_logstash.py`` and stop with Ctrl+C.
"""

import logging
import random
import time

from logstash_reporter import Reporter, ReporterConfig, default_registry, get_logger

logger = get_logger(__name__)


def simulate_work() -> None:
    """Update the default registry as a busy service would."""
    requests = default_registry.counter("api.requests")
    in_flight = default_registry.gauge("api.in_flight")
    load = default_registry.gauge_float64("host.load1")
    payload = default_registry.histogram("api.payload_bytes")
    throughput = default_registry.meter("api.throughput")
    latency = default_registry.timer("api.latency")

    while True:
        with latency.time():
            time.sleep(random.uniform(0.001, 0.02))
        requests.inc()
        throughput.mark()
        in_flight.update(random.randint(0, 8))
        load.update(random.uniform(0.0, 2.0))
        payload.update(random.randint(200, 4000))


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    config = ReporterConfig(
        address="localhost:1984",
        default_values={"client": "example-service", "metric": "doc"},
        interval=5.0,
    )
    with Reporter.from_config(config) as reporter:
        reporter.start(config.interval)
        logger.info("reporting to %s every %.1fs", config.address, config.interval)
        try:
            simulate_work()
        except KeyboardInterrupt:
            logger.info("stopping")


if __name__ == "__main__":
    main()
