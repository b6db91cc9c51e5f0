"""Associations, the edges of the SageMaker lineage graph."""
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from ..apiutils import Record
from ..session import Session
from ._api_types import AssociationSummary


class Association(Record):
    """An Amazon SageMaker association between two lineage entities.

    Examples:
        .. code-block:: python

            from smkit.lineage import association

            my_association = association.Association.create(
                source_arn=artifact_arn,
                destination_arn=trial_component_arn,
                association_type='ContributedTo')

            for assoctn in association.Association.list():
                print(assoctn)

            my_association.delete()

    Attributes:
        source_arn (str): The ARN of the source entity.
        source_type (str): The type of the source entity.
        destination_arn (str): The ARN of the destination entity.
        destination_type (str): The type of the destination entity.
        association_type (str): the type of the association.
    """

    source_arn = None
    source_type = None
    destination_arn = None
    destination_type = None
    association_type = None

    _boto_create_method = "add_association"
    _boto_delete_method = "delete_association"

    _custom_boto_types: Dict = {}

    _boto_delete_members = ["source_arn", "destination_arn"]

    def delete(self):
        """Delete this Association from SageMaker."""
        self._invoke_api(self._boto_delete_method, self._boto_delete_members)

    def set_tag(self, tag: Optional[Dict[str, str]] = None) -> List[Dict[str, str]]:
        """Add a tag to the source entity of the association.

        Args:
            tag (dict): Key value pair to set tag.

        Returns:
            list({str:str}): a list of key value pairs
        """
        return self._set_tags(resource_arn=self.source_arn, tags=[tag])

    def set_tags(self, tags: Optional[List[Dict[str, str]]] = None) -> List[Dict[str, str]]:
        """Add tags to the source entity of the association.

        Args:
            tags ([{key:value}]): list of key value pairs.

        Returns:
            list({str:str}): a list of key value pairs
        """
        return self._set_tags(resource_arn=self.source_arn, tags=tags)

    @classmethod
    def create(
        cls,
        source_arn: str,
        destination_arn: str,
        association_type: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> "Association":
        """Add an association and return an ``Association`` object representing it.

        Args:
            source_arn (str): The ARN of the source.
            destination_arn (str): The ARN of the destination.
            association_type (str): The type of the association. ContributedTo, AssociatedWith, DerivedFrom, or
                Produced.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.

        Returns:
            association: A SageMaker ``Association`` object.
        """
        return super(Association, cls)._construct(
            cls._boto_create_method,
            source_arn=source_arn,
            destination_arn=destination_arn,
            association_type=association_type,
            sagemaker_session=sagemaker_session,
        )

    @classmethod
    def list(
        cls,
        source_arn: Optional[str] = None,
        destination_arn: Optional[str] = None,
        source_type: Optional[str] = None,
        destination_type: Optional[str] = None,
        association_type: Optional[str] = None,
        created_after: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        max_results: Optional[int] = None,
        next_token: Optional[str] = None,
        sagemaker_session: Optional[Session] = None,
    ) -> Iterator[AssociationSummary]:
        """Return a list of association summaries.

        Args:
            source_arn (str): The ARN of the source entity.
            destination_arn (str): The ARN of the destination entity.
            source_type (str): The type of the source entity.
            destination_type (str): The type of the destination entity.
            association_type (str): The type of the association.
            created_after (datetime.datetime, optional): Return associations created after this instant.
            created_before (datetime.datetime, optional): Return associations created before this instant.
            sort_by (str, optional): Which property to sort results by. One of 'SourceArn', 'CreatedBefore',
                'CreatedAfter'
            sort_order (str, optional): One of 'Ascending', or 'Descending'.
            max_results (int, optional): maximum number of associations to retrieve per page
            next_token (str, optional): token for next page of results
            sagemaker_session (smkit.session.Session): Session object. If not specified, one is created using
                the default AWS configuration chain.

        Returns:
            collections.Iterator[AssociationSummary]: An iterator over ``AssociationSummary`` objects.
        """
        return super(Association, cls)._list(
            "list_associations",
            AssociationSummary._from_boto,
            "AssociationSummaries",
            source_arn=source_arn,
            destination_arn=destination_arn,
            source_type=source_type,
            destination_type=destination_type,
            association_type=association_type,
            created_before=created_before,
            created_after=created_after,
            sort_by=sort_by,
            sort_order=sort_order,
            max_results=max_results,
            next_token=next_token,
            sagemaker_session=sagemaker_session,
        )
