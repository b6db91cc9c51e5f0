"""Value objects of the SageMaker lineage APIs."""
from enum import Enum

from ..apiutils import ApiObject


class ArtifactSourceTypeEnum(Enum):
    """Kinds of source id of an artifact."""

    MD5_HASH = "MD5Hash"
    S3_ETAG = "S3ETag"
    S3_VERSION = "S3Version"
    CUSTOM = "Custom"


class LineageEntityEnum(Enum):
    """Kinds of entity in the lineage graph."""

    TRIAL = "Trial"
    ACTION = "Action"
    ARTIFACT = "Artifact"
    CONTEXT = "Context"
    TRIAL_COMPONENT = "TrialComponent"


class AssociationTypeEnum(Enum):
    """Kinds of association between two lineage entities."""

    CONTRIBUTED_TO = "ContributedTo"
    ASSOCIATED_WITH = "AssociatedWith"
    DERIVED_FROM = "DerivedFrom"
    PRODUCED = "Produced"


class ArtifactSourceType(ApiObject):
    """A source id of an artifact, e.g. its S3 ETag."""

    source_id_type = None
    value = None

    def __init__(self, source_id_type=None, value=None, **kwargs):
        super().__init__(source_id_type=source_id_type, value=value, **kwargs)


class ArtifactSource(ApiObject):
    """The URI and source ids of an artifact."""

    source_uri = None
    source_types = None

    _custom_boto_types = {"source_types": (ArtifactSourceType, True)}

    def __init__(self, source_uri=None, source_types=None, **kwargs):
        super().__init__(source_uri=source_uri, source_types=source_types, **kwargs)


class ActionSource(ApiObject):
    """The URI and type of the source of an action."""

    source_uri = None
    source_type = None

    def __init__(self, source_uri=None, source_type=None, **kwargs):
        super().__init__(source_uri=source_uri, source_type=source_type, **kwargs)


class ContextSource(ApiObject):
    """The URI and type of the source of a context."""

    source_uri = None
    source_type = None

    def __init__(self, source_uri=None, source_type=None, **kwargs):
        super().__init__(source_uri=source_uri, source_type=source_type, **kwargs)


class ArtifactSummary(ApiObject):
    """Summary model of an Artifact.

    Attributes:
        artifact_arn (str): ARN of artifact.
        artifact_name (str): Name of artifact.
        source (obj): Source of artifact.
        artifact_type (str): Type of artifact.
        creation_time (datetime): Creation time.
        last_modified_time (datetime): Date last modified.
    """

    _custom_boto_types = {"source": (ArtifactSource, False)}

    artifact_arn = None
    artifact_name = None
    source = None
    artifact_type = None
    creation_time = None
    last_modified_time = None


class ActionSummary(ApiObject):
    """Summary model of an action.

    Attributes:
        action_arn (str): ARN of action.
        action_name (str): Name of action.
        source (obj): Source of action.
        action_type (str): Type of action.
        status (str): The status of the action.
        creation_time (datetime): Creation time.
        last_modified_time (datetime): Date last modified.
    """

    _custom_boto_types = {"source": (ActionSource, False)}

    action_arn = None
    action_name = None
    source = None
    action_type = None
    status = None
    creation_time = None
    last_modified_time = None


class ContextSummary(ApiObject):
    """Summary model of a context.

    Attributes:
        context_arn (str): ARN of context.
        context_name (str): Name of context.
        source (obj): Source of context.
        context_type (str): Type of context.
        creation_time (datetime): Creation time.
        last_modified_time (datetime): Date last modified.
    """

    _custom_boto_types = {"source": (ContextSource, False)}

    context_arn = None
    context_name = None
    source = None
    context_type = None
    creation_time = None
    last_modified_time = None


class AssociationSummary(ApiObject):
    """Summary model of an association.

    Attributes:
        source_arn (str): ARN of source entity.
        source_name (str): Name of the source entity.
        destination_arn (str): ARN of the destination entity.
        destination_name (str): Name of the destination entity.
        source_type (obj): Type of the source entity.
        destination_type (str): Type of destination entity.
        association_type (str): The type of the association.
        creation_time (datetime): Creation time.
        created_by (obj): Context on creator.
    """

    source_arn = None
    source_name = None
    destination_arn = None
    destination_name = None
    source_type = None
    destination_type = None
    association_type = None
    creation_time = None
    created_by = None
