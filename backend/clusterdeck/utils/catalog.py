"""Reference catalog for external link monitoring tools."""
from typing import Dict


# Default monitoring tools seeded on first start
# Key: tool name, Value: icon URL shown next to the link in the UI
DEFAULT_MONITORING_TOOLS: Dict[str, str] = {
    "Grafana": "/icons/grafana.svg",
    "Kibana": "/icons/kibana.svg",
    "Newrelic": "/icons/newrelic.svg",
    "Coralogix": "/icons/coralogix.svg",
    "Datadog": "/icons/datadog.svg",
    "Loki": "/icons/loki.svg",
    "Cloudwatch": "/icons/cloudwatch.svg",
    "Swagger": "/icons/swagger.svg",
    "Jaeger": "/icons/jaeger.svg",
    "Other": "/icons/other.svg",
}
