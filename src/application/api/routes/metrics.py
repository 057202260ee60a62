"""
Metrics Routes
==============

Prometheus scrape endpoint.

Metrics format:
    # HELP metric_name Description of the metric
    # TYPE metric_name counter
    metric_name{label="value"} 123.45

Example scrape config:

    scrape_configs:
      - job_name: 'screenshot-gateway'
        metrics_path: '/metrics'
        static_configs:
          - targets: ['gateway:8000']
"""

from fastapi import APIRouter, Response

from src.application.api.dependencies import MetricsDep

router = APIRouter(tags=["Metrics"])


@router.get("/metrics")
async def get_prometheus_metrics(metrics: MetricsDep) -> Response:
    """
    Expose metrics in Prometheus text format for scraping.

    Returns:
        Response: Prometheus-formatted metrics as plain text
    """
    return Response(content=metrics.get_prometheus_metrics(), media_type=metrics.get_content_type())
