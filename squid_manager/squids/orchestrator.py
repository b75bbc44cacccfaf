"""
ECS adapter used by the fleet inspector and the downgrade operation.

Wraps a boto3 ECS client bound to one cluster and returns plain dictionaries
exactly as the API shapes them. Errors from botocore propagate to the caller;
deciding whether a failure is fatal belongs to the fleet inspector and the
squid service.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Final

import boto3

from squid_manager.squids.networks import is_squid_service

# DescribeServices accepts at most 10 services per call; DescribeTasks at most 100 tasks.
DESCRIBE_SERVICES_BATCH: Final[int] = 10
DESCRIBE_TASKS_BATCH: Final[int] = 100

ELASTIC_NETWORK_INTERFACE: Final[str] = "ElasticNetworkInterface"
PRIVATE_IPV4_ADDRESS: Final[str] = "privateIPv4Address"


def _chunks(items: Sequence[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def private_ipv4_address(task: dict[str, Any]) -> str | None:
    """Return the private address of the task's ENI attachment, if any."""

    for attachment in task.get("attachments") or []:
        if attachment.get("type") != ELASTIC_NETWORK_INTERFACE:
            continue
        for detail in attachment.get("details") or []:
            if detail.get("name") == PRIVATE_IPV4_ADDRESS and detail.get("value"):
                return str(detail["value"])
    return None


class EcsOrchestrator:
    """Cluster-scoped ECS operations."""

    def __init__(self, *, cluster: str, region: str = "us-east-1", client: Any | None = None) -> None:
        self.cluster = cluster
        self.client = client or boto3.client("ecs", region_name=region)

    def list_squid_service_arns(self) -> list[str]:
        paginator = self.client.get_paginator("list_services")
        arns: list[str] = []
        for page in paginator.paginate(cluster=self.cluster):
            arns.extend(arn for arn in page.get("serviceArns", []) if is_squid_service(arn))
        return arns

    def describe_services(self, service_arns: Sequence[str]) -> list[dict[str, Any]]:
        services: list[dict[str, Any]] = []
        for batch in _chunks(service_arns, DESCRIBE_SERVICES_BATCH):
            response = self.client.describe_services(cluster=self.cluster, services=batch)
            services.extend(response.get("services", []))
        return services

    def list_task_arns(self, service_name: str) -> list[str]:
        response = self.client.list_tasks(cluster=self.cluster, serviceName=service_name)
        return list(response.get("taskArns", []))

    def describe_tasks(self, task_arns: Sequence[str]) -> list[dict[str, Any]]:
        tasks: list[dict[str, Any]] = []
        for batch in _chunks(task_arns, DESCRIBE_TASKS_BATCH):
            response = self.client.describe_tasks(cluster=self.cluster, tasks=batch)
            tasks.extend(response.get("tasks", []))
        return tasks

    def set_desired_count(self, service_name: str, desired_count: int) -> dict[str, Any]:
        return self.client.update_service(
            cluster=self.cluster,
            service=service_name,
            desiredCount=desired_count,
        )
