"""
Kind normalization.

OpenShift specific object kinds are rewritten into their Kubernetes
equivalents before variables are substituted.
"""

import logging
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


class KindNormalizer:
    """
    Applies structural fixes to objects whose shape differs between
    OpenShift and Kubernetes.

    - DeploymentConfig: becomes an apps/v1 Deployment; a Rolling strategy
      becomes RollingUpdate with its tuning fields moved out of rollingParams
    - Route: apiVersion moves to the route.openshift.io group
    - anything else passes through untouched
    """

    DEPLOYMENT_CONFIG_KIND = "DeploymentConfig"
    DEPLOYMENT_KIND = "Deployment"
    DEPLOYMENT_API_VERSION = "apps/v1"
    ROUTE_KIND = "Route"
    ROUTE_API_VERSION = "route.openshift.io/v1"

    LEGACY_ROLLING_STRATEGY = "Rolling"
    ROLLING_UPDATE_STRATEGY = "RollingUpdate"
    ROLLING_TUNING_FIELDS = ("maxSurge", "maxUnavailable")

    def normalize(self, objects: Optional[List[Any]]) -> Optional[List[Any]]:
        """Normalize every object in document order, in place."""
        for obj in objects or []:
            if isinstance(obj, dict):
                self.normalize_object(obj)
        return objects

    def normalize_object(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        kind = obj.get('kind')
        if kind == self.DEPLOYMENT_CONFIG_KIND:
            self._convert_deployment_config(obj)
        elif kind == self.ROUTE_KIND:
            logger.info(f"Changing apiVersion for '{_object_name(obj)}'")
            obj['apiVersion'] = self.ROUTE_API_VERSION
        return obj

    def _convert_deployment_config(self, obj: Dict[str, Any]):
        name = _object_name(obj)
        logger.info(f"Changing DeploymentConfig -> Deployment for '{name}'")
        obj['kind'] = self.DEPLOYMENT_KIND
        obj['apiVersion'] = self.DEPLOYMENT_API_VERSION

        spec = obj.get('spec')
        if not isinstance(spec, dict):
            return
        strategy = spec.get('strategy')
        if not isinstance(strategy, dict) or strategy.get('type') != self.LEGACY_ROLLING_STRATEGY:
            return

        logger.info(f"Changing Update strategy for '{name}'")
        strategy['type'] = self.ROLLING_UPDATE_STRATEGY
        rolling_params = strategy.pop('rollingParams', None)
        if not isinstance(rolling_params, dict):
            rolling_params = {}
        strategy['rollingUpdate'] = {
            field: rolling_params[field]
            for field in self.ROLLING_TUNING_FIELDS
            if field in rolling_params
        }
        # Deployments have no triggers
        spec.pop('triggers', None)
        obj.pop('triggers', None)


def _object_name(obj: Dict[str, Any]) -> Optional[str]:
    metadata = obj.get('metadata')
    if isinstance(metadata, dict):
        return metadata.get('name')
    return None
