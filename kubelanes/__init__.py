"""KubeLanes: resource correlation and health-timeline engine.

Turns a flat stream of cluster change events into a forest of resource
lanes and a health timeline per lane, for swimlane dashboards.
"""

__version__ = "0.1.0"
