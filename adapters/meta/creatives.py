import structlog

from adapters.meta.client import MetaClient, normalize_ad_account_id, to_created_resource
from adapters.meta.models.creative_model import PlacementCreativeSpec, StandardCreativeSpec
from adapters.meta.models.resource_model import CreatedResource
from adapters.meta.transformers import transform_placement_creative, transform_standard_creative
from adapters.meta.validators import validate_asset_feed_spec, validate_creative_type
from core.credentials import Credential
from exceptions.custom_exceptions import AssetFeedSpecException

logger = structlog.get_logger(__name__)


class MetaCreativeAdapter:
    def _get_client(self, credential: Credential) -> MetaClient:
        return MetaClient(credential)

    def validate(self, spec: StandardCreativeSpec | PlacementCreativeSpec) -> None:
        if isinstance(spec, PlacementCreativeSpec):
            validate_creative_type(spec.object_story_spec, spec.asset_feed_spec).raise_for_error(
                AssetFeedSpecException
            )
            validate_asset_feed_spec(spec.asset_feed_spec).raise_for_error(AssetFeedSpecException)
        else:
            story = spec.object_story_spec.model_dump(exclude_none=True)
            validate_creative_type(story, None).raise_for_error()

    async def create_standard(
        self,
        ad_account_id: str,
        spec: StandardCreativeSpec,
        credential: Credential,
    ) -> CreatedResource:
        self.validate(spec)
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/adcreatives",
            data=transform_standard_creative(spec),
        )
        created = to_created_resource(response, "creative")
        logger.info("meta_creative_created", ad_account_id=account_id, creative_id=created.id)
        return created

    async def create_with_placements(
        self,
        ad_account_id: str,
        spec: PlacementCreativeSpec,
        credential: Credential,
    ) -> CreatedResource:
        self.validate(spec)
        account_id = normalize_ad_account_id(ad_account_id)
        response = await self._get_client(credential).post_form(
            f"/act_{account_id}/adcreatives",
            data=transform_placement_creative(spec),
        )
        created = to_created_resource(response, "creative")
        logger.info(
            "meta_creative_created",
            ad_account_id=account_id,
            creative_id=created.id,
            placement_rules=len(spec.asset_feed_spec["asset_customization_rules"]),
        )
        return created


meta_creative_adapter = MetaCreativeAdapter()
