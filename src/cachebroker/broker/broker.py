"""Cache cluster broker: the service instance lifecycle over a cluster backend."""

import logging

from cachebroker.backends.accounts import AccountLookup
from cachebroker.backends.base import CacheClusterBackend, ClusterNotFoundError, ClusterSpec
from cachebroker.broker.errors import (
    AsyncRequiredError,
    InstanceDoesNotExistError,
    InstanceNotBindableError,
    InstanceNotUpdateableError,
    PlanNotFoundError,
    ServiceNotFoundError,
)
from cachebroker.broker.identifiers import cluster_arn, derive_cluster_id
from cachebroker.broker.models import (
    BindDetails,
    Binding,
    Credentials,
    DeprovisionDetails,
    LastOperation,
    ProvisionDetails,
    UnbindDetails,
    UpdateDetails,
)
from cachebroker.broker.parameters import (
    ProvisionParameters,
    UpdateParameters,
    decode_parameters,
)
from cachebroker.broker.spec_builder import Clock, TagAction, build_cluster_spec, local_now
from cachebroker.broker.status import classify_status
from cachebroker.catalog import Catalog, Service, ServicePlan

logger = logging.getLogger(__name__)


class CacheClusterBroker:
    """
    Implements provision, update, deprovision, bind, unbind and last
    operation on top of a cache cluster backend.

    The broker keeps no state between calls: every instance lives only in
    the backend, under the cluster id derived from its instance id, and its
    status is read back from the backend on each poll. Mutations return as
    soon as the backend accepts them; callers poll ``last_operation`` for
    completion.

    Concurrent mutations of the same instance are not serialized here; the
    backend is expected to reject or order them.
    """

    def __init__(
        self,
        catalog: Catalog,
        backend: CacheClusterBackend,
        account_lookup: AccountLookup,
        cache_prefix: str,
        region: str,
        allow_user_provision_parameters: bool = False,
        allow_user_update_parameters: bool = False,
        clock: Clock = local_now,
    ) -> None:
        """
        Initialize the broker.

        Args:
            catalog: Services and plans offered
            backend: Cache cluster backend
            account_lookup: Resolves the account used in cluster ARNs
            cache_prefix: Prefix of derived cluster ids
            region: Region of the backend, used in cluster ARNs
            allow_user_provision_parameters: Honour user parameters on provision
            allow_user_update_parameters: Honour user parameters on update
            clock: Source of tag timestamps
        """
        self.catalog = catalog
        self.backend = backend
        self.account_lookup = account_lookup
        self.cache_prefix = cache_prefix
        self.region = region
        self.allow_user_provision_parameters = allow_user_provision_parameters
        self.allow_user_update_parameters = allow_user_update_parameters
        self._clock = clock

    def cluster_id(self, instance_id: str) -> str:
        """Get the backend cluster id of an instance."""
        return derive_cluster_id(self.cache_prefix, instance_id)

    def services(self) -> tuple[Service, ...]:
        """Get the services offered by the broker."""
        return self.catalog.services

    def provision(
        self,
        instance_id: str,
        details: ProvisionDetails,
        accepts_incomplete: bool,
    ) -> bool:
        """
        Start creating the cluster of a new instance.

        Args:
            instance_id: Platform instance id
            details: Provision request details
            accepts_incomplete: Whether the caller accepts asynchronous completion

        Returns:
            True: the operation was accepted and completes asynchronously

        Raises:
            AsyncRequiredError: If accepts_incomplete is False
            InvalidParametersError: If user parameters cannot be decoded
            PlanNotFoundError: If the plan is not in the catalog
            CacheClusterBackendError: If the backend rejects the request
        """
        logger.debug(
            f"provision instance-id={instance_id} details={details} "
            f"accepts-incomplete={accepts_incomplete}"
        )

        if not accepts_incomplete:
            raise AsyncRequiredError()

        parameters = ProvisionParameters()
        if self.allow_user_provision_parameters:
            parameters = decode_parameters(ProvisionParameters, details.parameters)

        plan = self._find_plan(details.plan_id)

        spec = build_cluster_spec(
            plan,
            TagAction.CREATED,
            service_id=details.service_id,
            plan_id=details.plan_id,
            organization_id=details.organization_guid,
            space_id=details.space_guid,
            clock=self._clock,
        )
        parameters.apply_to(spec)

        cluster_id = self.cluster_id(instance_id)
        self.backend.create(cluster_id, spec)
        logger.info(f"Requested creation of cache cluster {cluster_id} for instance {instance_id}")

        return True

    def update(
        self,
        instance_id: str,
        details: UpdateDetails,
        accepts_incomplete: bool,
    ) -> bool:
        """
        Start modifying the cluster of an instance to match a plan.

        Tags are attached in a separate best-effort call after the backend
        accepted the modification.

        Args:
            instance_id: Platform instance id
            details: Update request details
            accepts_incomplete: Whether the caller accepts asynchronous completion

        Returns:
            True: the operation was accepted and completes asynchronously

        Raises:
            AsyncRequiredError: If accepts_incomplete is False
            InvalidParametersError: If user parameters cannot be decoded
            ServiceNotFoundError: If the service is not in the catalog
            InstanceNotUpdateableError: If the service does not allow plan updates
            PlanNotFoundError: If the plan is not in the catalog
            InstanceDoesNotExistError: If the cluster does not exist
            CacheClusterBackendError: If the backend rejects the request
        """
        logger.debug(
            f"update instance-id={instance_id} details={details} "
            f"accepts-incomplete={accepts_incomplete}"
        )

        if not accepts_incomplete:
            raise AsyncRequiredError()

        parameters = UpdateParameters()
        if self.allow_user_update_parameters:
            parameters = decode_parameters(UpdateParameters, details.parameters)

        service = self._find_service(details.service_id)
        if not service.plan_updateable:
            raise InstanceNotUpdateableError(service.id)

        plan = self._find_plan(details.plan_id)

        spec = build_cluster_spec(
            plan,
            TagAction.UPDATED,
            service_id=details.service_id,
            plan_id=details.plan_id,
            clock=self._clock,
        )
        parameters.apply_to(spec)

        cluster_id = self.cluster_id(instance_id)
        try:
            self.backend.modify(cluster_id, spec, parameters.apply_immediately)
        except ClusterNotFoundError as e:
            raise InstanceDoesNotExistError(instance_id) from e
        logger.info(f"Requested modification of cache cluster {cluster_id} for instance {instance_id}")

        if spec.tags:
            self._attach_tags(cluster_id, spec)

        return True

    def deprovision(
        self,
        instance_id: str,
        details: DeprovisionDetails,
        accepts_incomplete: bool,
    ) -> bool:
        """
        Start deleting the cluster of an instance.

        Args:
            instance_id: Platform instance id
            details: Deprovision request details
            accepts_incomplete: Whether the caller accepts asynchronous completion

        Returns:
            True: the operation was accepted and completes asynchronously

        Raises:
            AsyncRequiredError: If accepts_incomplete is False
            InstanceDoesNotExistError: If the cluster does not exist
            CacheClusterBackendError: If the backend rejects the request
        """
        logger.debug(
            f"deprovision instance-id={instance_id} details={details} "
            f"accepts-incomplete={accepts_incomplete}"
        )

        if not accepts_incomplete:
            raise AsyncRequiredError()

        cluster_id = self.cluster_id(instance_id)
        try:
            self.backend.delete(cluster_id)
        except ClusterNotFoundError as e:
            raise InstanceDoesNotExistError(instance_id) from e
        logger.info(f"Requested deletion of cache cluster {cluster_id} for instance {instance_id}")

        return True

    def bind(self, instance_id: str, binding_id: str, details: BindDetails) -> Binding:
        """
        Hand out the connection details of an instance's cluster.

        No backend resource is created; the credentials describe the
        existing cluster endpoint.

        Raises:
            ServiceNotFoundError: If the service is not in the catalog
            InstanceNotBindableError: If the service does not allow bindings
            InstanceDoesNotExistError: If the cluster does not exist
            CacheClusterBackendError: If the backend call fails
        """
        logger.debug(
            f"bind instance-id={instance_id} binding-id={binding_id} details={details}"
        )

        service = self._find_service(details.service_id)
        if not service.bindable:
            raise InstanceNotBindableError(service.id)

        cluster_id = self.cluster_id(instance_id)
        try:
            cluster = self.backend.describe(cluster_id)
        except ClusterNotFoundError as e:
            raise InstanceDoesNotExistError(instance_id) from e

        return Binding(
            credentials=Credentials(
                host=cluster.endpoint,
                port=cluster.port,
                name=cluster_id,
            )
        )

    def unbind(self, instance_id: str, binding_id: str, details: UnbindDetails) -> None:
        """Remove a binding. Bindings leave nothing in the backend, so this is a no-op."""
        logger.debug(
            f"unbind instance-id={instance_id} binding-id={binding_id} details={details}"
        )

    def last_operation(self, instance_id: str) -> LastOperation:
        """
        Report the state of the last operation on an instance.

        Raises:
            InstanceDoesNotExistError: If the cluster does not exist
            CacheClusterBackendError: If the backend call fails
        """
        logger.debug(f"last-operation instance-id={instance_id}")

        cluster_id = self.cluster_id(instance_id)
        try:
            cluster = self.backend.describe(cluster_id)
        except ClusterNotFoundError as e:
            raise InstanceDoesNotExistError(instance_id) from e

        return LastOperation(
            state=classify_status(cluster.status),
            description=f"Cache Cluster Instance '{cluster_id}' status is '{cluster.status}'",
        )

    def _find_service(self, service_id: str) -> Service:
        service = self.catalog.find_service(service_id)
        if service is None:
            raise ServiceNotFoundError(service_id)
        return service

    def _find_plan(self, plan_id: str) -> ServicePlan:
        plan = self.catalog.find_service_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    def _attach_tags(self, cluster_id: str, spec: ClusterSpec) -> None:
        """
        Attach the cluster spec's tags to a modified cluster.

        Failures are logged and dropped: the modification has already been
        accepted and its outcome does not depend on the tags.
        """
        try:
            account_id = self.account_lookup.account_id()
            resource_name = cluster_arn(self.region, account_id, cluster_id)
            self.backend.add_tags_to_resource(resource_name, spec.tags)
        except Exception as e:
            logger.warning(f"Failed to tag cache cluster {cluster_id}: {e}")
