"""Kubernetes client for locating the dev environment repository."""

from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from hoist.core.exceptions import KubernetesError
from hoist.utils.logging import get_logger
from hoist.utils.retry import retry_on_exception

logger = get_logger(__name__)

ENVIRONMENT_GROUP = "jenkins.io"
ENVIRONMENT_VERSION = "v1"
ENVIRONMENT_PLURAL = "environments"


class KubernetesClient:
    """Kubernetes client wrapper."""

    def __init__(self, kubeconfig_path: str | None = None, context: str | None = None):
        """Initialize Kubernetes client.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)
        """
        try:
            if kubeconfig_path:
                config.load_kube_config(config_file=kubeconfig_path, context=context)
            else:
                # Try to load from default location or in-cluster config
                try:
                    config.load_kube_config(context=context)
                except config.ConfigException:
                    config.load_incluster_config()

            self.custom_objects = client.CustomObjectsApi()

            logger.debug("k8s_client_initialized", context=context)

        except Exception as e:
            logger.error("k8s_client_initialization_failed", error=str(e))
            raise KubernetesError("Failed to initialize Kubernetes client") from e

    @retry_on_exception(exceptions=(ApiException,), max_attempts=3)
    def _get_environment(self, name: str, namespace: str) -> dict[str, Any]:
        return self.custom_objects.get_namespaced_custom_object(
            group=ENVIRONMENT_GROUP,
            version=ENVIRONMENT_VERSION,
            namespace=namespace,
            plural=ENVIRONMENT_PLURAL,
            name=name,
        )

    def get_environment_source_url(self, name: str = "dev", namespace: str = "jx") -> str:
        """Get the git URL an Environment resource is sourced from.

        Args:
            name: Environment name
            namespace: Namespace the environments live in

        Returns:
            ``spec.source.url`` of the environment

        Raises:
            KubernetesError: If the environment cannot be read or has no source URL
        """
        try:
            logger.debug("getting_environment", name=name, namespace=namespace)
            environment = self._get_environment(name, namespace)
        except ApiException as e:
            logger.error(
                "get_environment_failed",
                name=name,
                namespace=namespace,
                status=e.status,
                reason=e.reason,
            )
            raise KubernetesError(
                f"failed to get {name} environment in namespace {namespace}: {e.reason}"
            ) from e
        except Exception as e:
            logger.error("get_environment_failed", name=name, namespace=namespace, error=str(e))
            raise KubernetesError(
                f"failed to get {name} environment in namespace {namespace}: {e}"
            ) from e

        source = (environment.get("spec") or {}).get("source") or {}
        url = source.get("url")
        if not url:
            raise KubernetesError(f"{name} environment in namespace {namespace} has no source URL")

        logger.info("environment_source_found", name=name, namespace=namespace)
        return url
