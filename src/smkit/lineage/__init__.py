"""Client-side records of the SageMaker lineage graph: contexts, artifacts, actions and their associations."""
from ._api_types import (  # noqa: F401
    ActionSource,
    ActionSummary,
    ArtifactSource,
    ArtifactSourceType,
    ArtifactSourceTypeEnum,
    ArtifactSummary,
    AssociationSummary,
    AssociationTypeEnum,
    ContextSource,
    ContextSummary,
    LineageEntityEnum,
)
from .action import Action  # noqa: F401
from .artifact import Artifact, DatasetArtifact, ModelArtifact  # noqa: F401
from .association import Association  # noqa: F401
from .context import Context, EndpointContext  # noqa: F401
