from typing import Optional

from ..session import Session
from . import association


def _disassociate(
    source_arn: Optional[str] = None, destination_arn: Optional[str] = None, sagemaker_session: Optional[Session] = None
):
    """Remove the associations of an entity.

    Removes the outgoing associations when ``source_arn`` is provided and the incoming ones when
    ``destination_arn`` is provided.
    """
    association_summaries = association.Association.list(
        source_arn=source_arn, destination_arn=destination_arn, sagemaker_session=sagemaker_session
    )
    for association_summary in association_summaries:
        curr_association = association.Association(
            sagemaker_session=sagemaker_session,
            source_arn=association_summary.source_arn,
            destination_arn=association_summary.destination_arn,
        )
        curr_association.delete()
