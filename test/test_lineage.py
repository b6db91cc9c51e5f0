import datetime

import pytest

from smkit.lineage import (
    Action,
    Artifact,
    ArtifactSource,
    ArtifactSourceType,
    ArtifactSummary,
    Association,
    Context,
    ContextSource,
    DatasetArtifact,
    EndpointContext,
)

CONTEXT_ARN = "arn:aws:sagemaker:us-west-2:111122223333:context/my-context"
ARTIFACT_ARN = "arn:aws:sagemaker:us-west-2:111122223333:artifact/abc123"


@pytest.fixture
def client(sagemaker_session):
    return sagemaker_session.sagemaker_client


def test_from_boto_builds_nested_objects():
    summary = ArtifactSummary._from_boto(
        {
            "ArtifactArn": ARTIFACT_ARN,
            "ArtifactType": "DataSet",
            "Source": {"SourceUri": "s3://bucket/train", "SourceTypes": [{"SourceIdType": "S3ETag", "Value": "etag"}]},
            "ResponseMetadata": {"HTTPStatusCode": 200},
        }
    )

    assert summary.artifact_arn == ARTIFACT_ARN
    assert summary.artifact_type == "DataSet"
    assert summary.source == ArtifactSource(
        source_uri="s3://bucket/train", source_types=[ArtifactSourceType(source_id_type="S3ETag", value="etag")]
    )
    assert "response_metadata" not in vars(summary)


def test_to_boto_drops_none_values():
    source = ArtifactSource(source_uri="s3://bucket/train", source_types=[ArtifactSourceType("MD5Hash", "d41d8")])
    assert ArtifactSource._to_boto(source) == {
        "SourceUri": "s3://bucket/train",
        "SourceTypes": [{"SourceIdType": "MD5Hash", "Value": "d41d8"}],
    }
    assert ContextSource._to_boto({"source_uri": "arn:endpoint", "source_type": None}) == {"SourceUri": "arn:endpoint"}


def test_create_context(sagemaker_session, client):
    client.create_context.return_value = {"ContextArn": CONTEXT_ARN, "ResponseMetadata": {}}

    context = Context.create(
        context_name="my-context",
        source_uri="arn:aws:sagemaker:us-west-2:111122223333:endpoint/my-endpoint",
        context_type="Endpoint",
        properties={"stage": "prod"},
        sagemaker_session=sagemaker_session,
    )

    client.create_context.assert_called_once_with(
        ContextName="my-context",
        Source={"SourceUri": "arn:aws:sagemaker:us-west-2:111122223333:endpoint/my-endpoint"},
        ContextType="Endpoint",
        Properties={"stage": "prod"},
    )
    assert context.context_arn == CONTEXT_ARN
    assert context.context_name == "my-context"
    assert context.sagemaker_session is sagemaker_session


def test_load_and_save_context(sagemaker_session, client):
    client.describe_context.return_value = {
        "ContextName": "my-context",
        "ContextArn": CONTEXT_ARN,
        "Source": {"SourceUri": "arn:endpoint", "SourceType": "Endpoint"},
        "Properties": {"stage": "dev"},
    }
    client.update_context.return_value = {"ContextArn": CONTEXT_ARN}

    context = Context.load("my-context", sagemaker_session=sagemaker_session)
    client.describe_context.assert_called_once_with(ContextName="my-context")
    assert context.source == ContextSource(source_uri="arn:endpoint", source_type="Endpoint")

    context.properties["stage"] = "prod"
    context.description = "serving"
    context.save()

    client.update_context.assert_called_once_with(
        ContextName="my-context", Description="serving", Properties={"stage": "prod"}
    )


def test_list_contexts_follows_next_token(sagemaker_session, client):
    created_after = datetime.datetime(2021, 6, 1)
    client.list_contexts.side_effect = [
        {"ContextSummaries": [{"ContextName": "ctx-1"}, {"ContextName": "ctx-2"}], "NextToken": "token"},
        {"ContextSummaries": [{"ContextName": "ctx-3"}]},
    ]

    contexts = list(
        Context.list(context_type="Endpoint", created_after=created_after, sagemaker_session=sagemaker_session)
    )

    assert [c.context_name for c in contexts] == ["ctx-1", "ctx-2", "ctx-3"]
    assert client.list_contexts.call_args_list[0].kwargs == {"ContextType": "Endpoint", "CreatedAfter": created_after}
    assert client.list_contexts.call_args_list[1].kwargs == {
        "ContextType": "Endpoint",
        "CreatedAfter": created_after,
        "NextToken": "token",
    }


def test_list_is_lazy(sagemaker_session, client):
    client.list_actions.return_value = {"ActionSummaries": [{"ActionName": "deploy"}]}
    actions = Action.list(sagemaker_session=sagemaker_session)
    client.list_actions.assert_not_called()
    assert next(actions).action_name == "deploy"
    client.list_actions.assert_called_once_with()


def test_delete_context_with_disassociate(sagemaker_session, client):
    client.list_associations.side_effect = [
        {"AssociationSummaries": [{"SourceArn": CONTEXT_ARN, "DestinationArn": "arn:action"}]},
        {"AssociationSummaries": [{"SourceArn": ARTIFACT_ARN, "DestinationArn": CONTEXT_ARN}]},
    ]
    context = Context(sagemaker_session, context_name="my-context", context_arn=CONTEXT_ARN)

    context.delete(disassociate=True)

    assert client.list_associations.call_args_list[0].kwargs == {"SourceArn": CONTEXT_ARN}
    assert client.list_associations.call_args_list[1].kwargs == {"DestinationArn": CONTEXT_ARN}
    assert [c.kwargs for c in client.delete_association.call_args_list] == [
        {"SourceArn": CONTEXT_ARN, "DestinationArn": "arn:action"},
        {"SourceArn": ARTIFACT_ARN, "DestinationArn": CONTEXT_ARN},
    ]
    client.delete_context.assert_called_once_with(ContextName="my-context")


def test_create_association_and_tags(sagemaker_session, client):
    client.add_association.return_value = {"SourceArn": ARTIFACT_ARN, "DestinationArn": CONTEXT_ARN}
    client.add_tags.return_value = {"Tags": [{"Key": "team", "Value": "ml"}]}

    association = Association.create(
        source_arn=ARTIFACT_ARN,
        destination_arn=CONTEXT_ARN,
        association_type="ContributedTo",
        sagemaker_session=sagemaker_session,
    )

    client.add_association.assert_called_once_with(
        SourceArn=ARTIFACT_ARN, DestinationArn=CONTEXT_ARN, AssociationType="ContributedTo"
    )
    assert association.set_tag({"Key": "team", "Value": "ml"}) == [{"Key": "team", "Value": "ml"}]
    client.add_tags.assert_called_once_with(ResourceArn=ARTIFACT_ARN, Tags=[{"Key": "team", "Value": "ml"}])


def test_create_artifact_with_source_types(sagemaker_session, client):
    client.create_artifact.return_value = {"ArtifactArn": ARTIFACT_ARN}

    artifact = Artifact.create(
        artifact_name="train-data",
        source_uri="s3://bucket/train",
        source_types=[ArtifactSourceType(source_id_type="S3ETag", value="etag")],
        artifact_type="DataSet",
        sagemaker_session=sagemaker_session,
    )

    client.create_artifact.assert_called_once_with(
        ArtifactName="train-data",
        Source={"SourceUri": "s3://bucket/train", "SourceTypes": [{"SourceIdType": "S3ETag", "Value": "etag"}]},
        ArtifactType="DataSet",
    )
    assert artifact.artifact_arn == ARTIFACT_ARN


def test_endpoint_context_models(sagemaker_session, client):
    client.list_associations.side_effect = [
        {"AssociationSummaries": [{"SourceArn": CONTEXT_ARN, "DestinationArn": "arn:deployment"}]},
        {"AssociationSummaries": [{"SourceArn": "arn:deployment", "DestinationArn": "arn:model"}]},
    ]
    context = EndpointContext(sagemaker_session, context_arn=CONTEXT_ARN)

    models = context.models()

    assert [m.destination_arn for m in models] == ["arn:model"]
    assert client.list_associations.call_args_list[0].kwargs == {
        "SourceArn": CONTEXT_ARN,
        "DestinationType": "ModelDeployment",
    }
    assert client.list_associations.call_args_list[1].kwargs == {
        "SourceArn": "arn:deployment",
        "DestinationType": "Model",
    }


def test_dataset_trained_models(sagemaker_session, client):
    trial_component = "arn:aws:sagemaker:us-west-2:111122223333:experiment-trial-component/train-job"
    client.list_associations.side_effect = [
        {
            "AssociationSummaries": [
                {"SourceArn": ARTIFACT_ARN, "DestinationArn": "arn:aws:sagemaker:us-west-2:111122223333:action/x"},
                {"SourceArn": ARTIFACT_ARN, "DestinationArn": trial_component},
            ]
        },
        {"AssociationSummaries": [{"SourceArn": trial_component, "DestinationArn": "arn:model-context"}]},
    ]
    artifact = DatasetArtifact(sagemaker_session, artifact_arn=ARTIFACT_ARN)

    models = artifact.trained_models()

    assert [m.destination_arn for m in models] == ["arn:model-context"]
    assert client.list_associations.call_count == 2
