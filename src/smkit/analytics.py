"""Pandas dataframes of tuning results, training metrics and experiment trial components."""
import datetime
import logging
from abc import ABCMeta, abstractmethod
from collections import OrderedDict, defaultdict
from typing import Any, Dict, List, Optional

import pandas as pd

from .session import Session
from .utils import paginate

logger = logging.getLogger(__name__)

METRICS_PERIOD_DEFAULT = 60  # seconds


class AnalyticsMetricsBase(object, metaclass=ABCMeta):
    """Base class for tuning job or training job analytics classes.

    Understands common functionality like persistence and caching.
    """

    def __init__(self):
        self._dataframe: Optional[pd.DataFrame] = None

    def export_csv(self, filename: str):
        """Persists the analytics dataframe to a file.

        Args:
            filename (str): The name of the file to save to.
        """
        self.dataframe().to_csv(filename)

    def dataframe(self, force_refresh: bool = False) -> pd.DataFrame:
        """A pandas dataframe with lots of interesting results about this object.

        Created by calling SageMaker List and Describe APIs and converting them into a convenient tabular
        summary.

        Args:
            force_refresh (bool): Set to True to fetch the latest data from SageMaker API.
        """
        if force_refresh:
            self.clear_cache()
        if self._dataframe is None:
            self._dataframe = self._fetch_dataframe()
        return self._dataframe

    @abstractmethod
    def _fetch_dataframe(self) -> pd.DataFrame:
        """Sub-class must calculate the dataframe and return it."""

    def clear_cache(self):
        """Clear the object of all local caches of API methods.

        So that the next time any properties are accessed they will be refreshed from the service.
        """
        self._dataframe = None


class HyperparameterTuningJobAnalytics(AnalyticsMetricsBase):
    """Fetch results about a hyperparameter tuning job and make them accessible for analytics."""

    def __init__(self, hyperparameter_tuning_job_name: str, sagemaker_session: Optional[Session] = None):
        """Initialize a ``HyperparameterTuningJobAnalytics`` instance.

        Args:
            hyperparameter_tuning_job_name (str): name of the HyperparameterTuningJob to analyze.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
        """
        sagemaker_session = sagemaker_session or Session()
        self._sagemaker_session = sagemaker_session
        self._sage_client = sagemaker_session.sagemaker_client
        self._tuning_job_name = hyperparameter_tuning_job_name
        self._tuning_job_describe_result: Optional[Dict[str, Any]] = None
        self._training_job_summaries: Optional[List[Dict[str, Any]]] = None
        super().__init__()
        self.clear_cache()

    @property
    def name(self) -> str:
        """Name of the HyperparameterTuningJob being analyzed."""
        return self._tuning_job_name

    def __repr__(self):
        return f"<smkit.HyperparameterTuningJobAnalytics for {self.name}>"

    def clear_cache(self):
        """Clear the object of all local caches of API methods."""
        super().clear_cache()
        self._tuning_job_describe_result = None
        self._training_job_summaries = None

    def _fetch_dataframe(self) -> pd.DataFrame:
        """Return a pandas dataframe with all the training jobs, their tuned hyperparameters and results."""

        def reshape(training_summary):
            # Helper method to reshape a single training job summary into a dataframe record
            out = {}
            for k, v in training_summary["TunedHyperParameters"].items():
                # numeric strings become floats
                try:
                    v = float(v)
                except (TypeError, ValueError):
                    pass
                out[k] = v
            out["TrainingJobName"] = training_summary["TrainingJobName"]
            out["TrainingJobStatus"] = training_summary["TrainingJobStatus"]
            out["FinalObjectiveValue"] = training_summary.get("FinalHyperParameterTuningJobObjectiveMetric", {}).get(
                "Value"
            )

            start_time = training_summary.get("TrainingStartTime", None)
            end_time = training_summary.get("TrainingEndTime", None)
            out["TrainingStartTime"] = start_time
            out["TrainingEndTime"] = end_time
            if start_time and end_time:
                out["TrainingElapsedTimeSeconds"] = (end_time - start_time).total_seconds()
            if "TrainingJobDefinitionName" in training_summary:
                out["TrainingJobDefinitionName"] = training_summary["TrainingJobDefinitionName"]
            return out

        # Run that helper over all the summaries.
        df = pd.DataFrame([reshape(tjs) for tjs in self.training_job_summaries()])
        return df

    @property
    def tuning_ranges(self) -> Dict[str, Any]:
        """A dictionary describing the ranges of all tuned hyperparameters.

        The keys are the names of the hyperparameter, and the values are the ranges. For a multi-algorithm
        tuning job, the keys are the training job definition names and the values are such dictionaries.
        """
        description = self.description()

        if "TrainingJobDefinition" in description:
            return self._prepare_parameter_ranges(
                description["HyperParameterTuningJobConfig"]["ParameterRanges"]
            )

        return {
            training_job_definition["DefinitionName"]: self._prepare_parameter_ranges(
                training_job_definition["HyperParameterRanges"]
            )
            for training_job_definition in description["TrainingJobDefinitions"]
        }

    @staticmethod
    def _prepare_parameter_ranges(parameter_ranges: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
        """Convert parameter ranges to a dictionary using the parameter range names as the keys."""
        out = {}
        for _, ranges in parameter_ranges.items():
            for param in ranges:
                out[param["Name"]] = param
        return out

    def description(self, force_refresh: bool = False) -> Dict[str, Any]:
        """Call ``DescribeHyperParameterTuningJob`` for the hyperparameter tuning job.

        Args:
            force_refresh (bool): Set to True to fetch the latest data from SageMaker API.

        Returns:
            dict: The Amazon SageMaker response for ``DescribeHyperParameterTuningJob``.
        """
        if force_refresh:
            self.clear_cache()
        if not self._tuning_job_describe_result:
            self._tuning_job_describe_result = self._sage_client.describe_hyper_parameter_tuning_job(
                HyperParameterTuningJobName=self.name
            )
        return self._tuning_job_describe_result

    def training_job_summaries(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        """A (paginated) list of everything from ``ListTrainingJobsForTuningJob``.

        Args:
            force_refresh (bool): Set to True to fetch the latest data from SageMaker API.

        Returns:
            dict: The Amazon SageMaker response for ``ListTrainingJobsForTuningJob``.
        """
        if force_refresh:
            self.clear_cache()
        if self._training_job_summaries is not None:
            return self._training_job_summaries

        output = self._sagemaker_session.list_training_jobs_for_tuning_job(self.name)
        logger.debug("Got %d training job summaries for %s", len(output), self.name)
        self._training_job_summaries = output
        return output


class TrainingJobAnalytics(AnalyticsMetricsBase):
    """Fetch training curve data from CloudWatch Metrics for a specific training job."""

    CLOUDWATCH_NAMESPACE = "/aws/sagemaker/TrainingJobs"

    def __init__(
        self,
        training_job_name: str,
        metric_names: Optional[List[str]] = None,
        sagemaker_session: Optional[Session] = None,
        start_time: Optional[datetime.datetime] = None,
        end_time: Optional[datetime.datetime] = None,
        period: Optional[int] = None,
    ):
        """Initialize a ``TrainingJobAnalytics`` instance.

        Args:
            training_job_name (str): name of the TrainingJob to analyze.
            metric_names (list, optional): string names of all the metrics to collect for this training job. If
                not specified, then it will use all metric names configured for this job.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
            start_time: Start of the metrics window. Defaults to the training start time.
            end_time: End of the metrics window. Defaults to one minute past the training end time.
            period (int): Granularity, in seconds, of the CloudWatch statistics (default: 60).
        """
        sagemaker_session = sagemaker_session or Session()
        self._sage_client = sagemaker_session.sagemaker_client
        self._cloudwatch = sagemaker_session.boto_session.client(
            "cloudwatch", config=sagemaker_session.client_config
        )
        self._training_job_name = training_job_name
        self._start_time = start_time
        self._end_time = end_time
        self._period = period or METRICS_PERIOD_DEFAULT

        if metric_names:
            self._metric_names = metric_names
        else:
            self._metric_names = self._metric_names_for_training_job()

        super().__init__()
        self.clear_cache()

    @property
    def name(self) -> str:
        """Name of the TrainingJob being analyzed."""
        return self._training_job_name

    def __repr__(self):
        return f"<smkit.TrainingJobAnalytics for {self.name}>"

    def clear_cache(self):
        """Clear the object of all local caches of API methods.

        This is so that the next time any properties are accessed they will be refreshed from the service.
        """
        super().clear_cache()
        self._data: Dict[str, List[Any]] = defaultdict(list)
        self._time_interval = self._determine_timeinterval()

    def _determine_timeinterval(self) -> Dict[str, datetime.datetime]:
        """Return a dictionary with two datetime objects, start_time and end_time, covering the training job."""
        description = self._sage_client.describe_training_job(TrainingJobName=self.name)
        start_time = self._start_time or description["TrainingStartTime"]  # datetime object
        # Incrementing end time by 1 min since CloudWatch drops seconds before finding the logs.
        # This results in logs being searched in the time range in which the correct log line was not present.
        # Example - Log time - 2018-10-22 08:25:55
        #       Here calculated end time would also be 2018-10-22 08:25:55 (without 1 min addition)
        #       CW will consider end time as 2018-10-22 08:25 and will not be able to search the correct log.
        end_time = self._end_time or description.get(
            "TrainingEndTime", datetime.datetime.now(datetime.timezone.utc)
        ) + datetime.timedelta(minutes=1)

        return {"start_time": start_time, "end_time": end_time}

    def _fetch_dataframe(self) -> pd.DataFrame:
        for metric_name in self._metric_names:
            self._fetch_metric(metric_name)
        return pd.DataFrame(self._data)

    def _fetch_metric(self, metric_name: str):
        """Fetch all the values of a named metric, and add them to _data."""
        request = {
            "Namespace": self.CLOUDWATCH_NAMESPACE,
            "MetricName": metric_name,
            "Dimensions": [{"Name": "TrainingJobName", "Value": self.name}],
            "StartTime": self._time_interval["start_time"],
            "EndTime": self._time_interval["end_time"],
            "Period": self._period,
            "Statistics": ["Average"],
        }
        raw_cwm_data = self._cloudwatch.get_metric_statistics(**request)["Datapoints"]
        if len(raw_cwm_data) == 0:
            logger.warning("Warning: No metrics called %s found", metric_name)
            return

        # Process data: normalize to starting time, and sort.
        base_time = min(raw_cwm_data, key=lambda pt: pt["Timestamp"])["Timestamp"]
        all_xy = []
        for pt in raw_cwm_data:
            y = pt["Average"]
            x = (pt["Timestamp"] - base_time).total_seconds()
            all_xy.append([x, y])
        all_xy = sorted(all_xy, key=lambda x: x[0])

        # Store everything in _data to make a dataframe from
        for elapsed_seconds, value in all_xy:
            self._add_single_metric(elapsed_seconds, metric_name, value)

    def _add_single_metric(self, timestamp: float, metric_name: str, value: float):
        """Store a single metric in the _data dict.

        This can be converted to a dataframe.
        """
        self._data["timestamp"].append(timestamp)
        self._data["metric_name"].append(metric_name)
        self._data["value"].append(value)

    def _metric_names_for_training_job(self) -> List[str]:
        """Helper method to discover the metrics defined for a training job."""
        training_description = self._sage_client.describe_training_job(TrainingJobName=self._training_job_name)

        metric_definitions = training_description["AlgorithmSpecification"].get("MetricDefinitions", [])
        metric_names = [md["Name"] for md in metric_definitions]

        return metric_names


class ExperimentAnalytics(AnalyticsMetricsBase):
    """Fetch trial component data and make them accessible for analytics."""

    MAX_TRIAL_COMPONENTS = 10000

    def __init__(
        self,
        experiment_name: Optional[str] = None,
        search_expression: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        metric_names: Optional[List[str]] = None,
        parameter_names: Optional[List[str]] = None,
        sagemaker_session: Optional[Session] = None,
        input_artifact_names: Optional[List[str]] = None,
        output_artifact_names: Optional[List[str]] = None,
    ):
        """Initialize an ``ExperimentAnalytics`` instance.

        Args:
            experiment_name (str, optional): Name of the experiment if you want to constrain the search to only
                trial components belonging to an experiment.
            search_expression (dict, optional): The search query to find the set of trial components to use to
                populate the data frame.
            sort_by (str, optional): The name of the resource property used to sort the set of trial components.
            sort_order (str optional): How trial components are ordered, valid values are Ascending and
                Descending. The default is Descending.
            metric_names (list, optional): string names of all the metrics to be shown in the data frame. If not
                specified, all metrics will be shown of all trials.
            parameter_names (list, optional): string names of the parameters to be shown in the data frame. If
                not specified, all parameters will be shown of all trials.
            sagemaker_session (smkit.session.Session): Session object which manages interactions with Amazon
                SageMaker APIs and any other AWS services needed. If not specified, one is created using the
                default AWS configuration chain.
            input_artifact_names (dict optional): The input artifacts for the experiment. Examples of input
                artifacts are datasets, algorithms, hyperparameters, source code, and instance types.
            output_artifact_names (dict optional): The output artifacts for the experiment. Examples of output
                artifacts are metrics, snapshots, logs, and images.

        Raises:
            ValueError: if neither an experiment name nor a search expression is given.
        """
        sagemaker_session = sagemaker_session or Session()
        self._sage_client = sagemaker_session.sagemaker_client

        if not search_expression and not experiment_name:
            raise ValueError("Either experiment_name or search_expression must be supplied.")

        self._experiment_name = experiment_name
        self._search_expression = search_expression
        self._sort_by = sort_by
        self._sort_order = sort_order
        self._metric_names = metric_names
        self._parameter_names = parameter_names
        self._input_artifact_names = input_artifact_names
        self._output_artifact_names = output_artifact_names
        self._trial_components: Optional[List[Dict[str, Any]]] = None
        super().__init__()
        self.clear_cache()

    @property
    def name(self) -> Optional[str]:
        """Name of the Experiment being analyzed."""
        return self._experiment_name

    def __repr__(self):
        return f"<smkit.ExperimentAnalytics for {self.name}>"

    def clear_cache(self):
        """Clear the object of all local caches of API methods."""
        super().clear_cache()
        self._trial_components = None

    def _reshape_parameters(self, parameters: Dict[str, Dict[str, Any]]) -> "OrderedDict[str, Any]":
        """Reshape trial component parameters to a pandas column."""
        out: "OrderedDict[str, Any]" = OrderedDict()
        for name, value in sorted(parameters.items()):
            if self._parameter_names and name not in self._parameter_names:
                continue
            out[name] = value.get("NumberValue", value.get("StringValue"))
        return out

    def _reshape_metrics(self, metrics: List[Dict[str, Any]]) -> "OrderedDict[str, Any]":
        """Reshape trial component metrics to a pandas column."""
        statistic_types = ["Min", "Max", "Avg", "StdDev", "Last", "Count"]
        out: "OrderedDict[str, Any]" = OrderedDict()
        for metric_summary in metrics:
            metric_name = metric_summary["MetricName"]
            if self._metric_names and metric_name not in self._metric_names:
                continue

            for stat_type in statistic_types:
                stat_value = metric_summary.get(stat_type)
                if stat_value is not None:
                    out[f"{metric_name} - {stat_type}"] = stat_value
        return out

    def _reshape_artifacts(
        self, artifacts: Dict[str, Dict[str, str]], _artifact_names: Optional[List[str]]
    ) -> "OrderedDict[str, Any]":
        """Reshape trial component input/output artifacts to a pandas column."""
        out: "OrderedDict[str, Any]" = OrderedDict()
        for name, value in sorted(artifacts.items()):
            if _artifact_names and (name not in _artifact_names):
                continue
            out[f"{name} - MediaType"] = value.get("MediaType")
            out[f"{name} - Value"] = value.get("Value")
        return out

    @staticmethod
    def _reshape_parents(parents: List[Dict[str, str]]) -> Dict[str, List[str]]:
        """Reshape trial component parents to a pandas column."""
        out: Dict[str, List[str]] = defaultdict(list)
        for parent in parents:
            out["Trials"].append(parent["TrialName"])
            out["Experiments"].append(parent["ExperimentName"])
        return out

    def _reshape(self, trial_component: Dict[str, Any]) -> "OrderedDict[str, Any]":
        """Reshape trial component data to pandas columns."""
        out: "OrderedDict[str, Any]" = OrderedDict()
        for attribute in ["TrialComponentName", "DisplayName"]:
            out[attribute] = trial_component.get(attribute, "")

        source = trial_component.get("Source", "")
        if source:
            out["SourceArn"] = source["SourceArn"]

        out.update(self._reshape_parameters(trial_component.get("Parameters", {})))
        out.update(self._reshape_metrics(trial_component.get("Metrics", [])))
        out.update(self._reshape_artifacts(trial_component.get("InputArtifacts", {}), self._input_artifact_names))
        out.update(self._reshape_artifacts(trial_component.get("OutputArtifacts", {}), self._output_artifact_names))
        out.update(self._reshape_parents(trial_component.get("Parents", [])))
        return out

    def _fetch_dataframe(self) -> pd.DataFrame:
        """Return a pandas dataframe includes all the trial_components."""
        df = pd.DataFrame([self._reshape(component) for component in self._get_trial_components()])
        return df

    def _get_trial_components(self, force_refresh: bool = False) -> List[Dict[str, Any]]:
        """Get all trial components matching the given search query expression."""
        if force_refresh:
            self.clear_cache()
        if self._trial_components is not None:
            return self._trial_components

        search_expression = dict(self._search_expression or {})
        if self._experiment_name:
            search_expression["Filters"] = list(search_expression.get("Filters", [])) + [
                {"Name": "Parents.ExperimentName", "Operator": "Equals", "Value": self._experiment_name}
            ]

        self._trial_components = self._search(search_expression, self._sort_by, self._sort_order)
        return self._trial_components

    def _search(
        self, search_expression: Dict[str, Any], sort_by: Optional[str], sort_order: Optional[str]
    ) -> List[Dict[str, Any]]:
        """Perform a search query using SageMaker Search and return the matching trial components."""
        search_args: Dict[str, Any] = {
            "Resource": "ExperimentTrialComponent",
            "SearchExpression": search_expression,
        }

        if sort_by:
            search_args["SortBy"] = sort_by

        if sort_order:
            search_args["SortOrder"] = sort_order

        results = paginate(self._sage_client.search, "Results", **search_args)
        trial_components = [result["TrialComponent"] for result in results]
        return trial_components[: self.MAX_TRIAL_COMPONENTS]
