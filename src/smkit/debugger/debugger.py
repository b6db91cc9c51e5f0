"""Debugger and profiler rules, hook configuration and TensorBoard output of training jobs.

Built-in rules are described by a base configuration dictionary, as returned by :func:`builtin_rule`, e.g.
``Rule.sagemaker(builtin_rule("VanishingGradient"), rule_parameters={"threshold": "0.0001"})``.
"""
from typing import Any, Dict, List, Optional

from .utils import DEFAULT_RULE_EVALUATOR_IMAGE, PROFILER_REPORT_RULE


def builtin_rule(rule_name: str, **rule_parameters: str) -> Dict[str, Any]:
    """Base configuration of a SageMaker built-in rule, e.g. ``builtin_rule("LossNotDecreasing")``."""
    parameters = {"rule_to_invoke": rule_name}
    parameters.update(rule_parameters)
    return {"DebugRuleConfiguration": {"RuleConfigurationName": rule_name, "RuleParameters": parameters}}


class RuleBase(object):
    """Attributes shared by debugger rules and profiler rules."""

    def __init__(
        self,
        name: str,
        image_uri: str,
        instance_type: Optional[str],
        container_local_output_path: Optional[str],
        s3_output_path: Optional[str],
        volume_size_in_gb: Optional[int],
        rule_parameters: Optional[Dict[str, str]],
    ):
        self.name = name
        self.image_uri = image_uri
        self.instance_type = instance_type
        self.container_local_output_path = container_local_output_path
        self.s3_output_path = s3_output_path
        self.volume_size_in_gb = volume_size_in_gb
        self.rule_parameters = rule_parameters

    @staticmethod
    def _set_rule_parameters(
        source: Optional[str], rule_to_invoke: Optional[str], rule_parameters: Optional[Dict[str, str]]
    ) -> Dict[str, str]:
        if source is not None and rule_to_invoke is None:
            raise ValueError("If you provide a source, you must also provide a rule to invoke (and vice versa).")

        merged_rule_params: Dict[str, str] = {}
        if source is not None and rule_to_invoke is not None:
            merged_rule_params["source_s3_uri"] = source
            merged_rule_params["rule_to_invoke"] = rule_to_invoke
        merged_rule_params.update(rule_parameters or {})
        return merged_rule_params

    def _common_request_dict(self, name_key: str) -> Dict[str, Any]:
        request: Dict[str, Any] = {name_key: self.name, "RuleEvaluatorImage": self.image_uri}
        if self.instance_type is not None:
            request["InstanceType"] = self.instance_type
        if self.volume_size_in_gb is not None:
            request["VolumeSizeInGB"] = self.volume_size_in_gb
        if self.container_local_output_path is not None:
            request["LocalPath"] = self.container_local_output_path
        if self.s3_output_path is not None:
            request["S3OutputPath"] = self.s3_output_path
        if self.rule_parameters:
            request["RuleParameters"] = self.rule_parameters
        return request


class Rule(RuleBase):
    """A debugger rule evaluated against the tensors saved by a training job.

    Use :meth:`sagemaker` for built-in rules and :meth:`custom` for rules run from your own image.
    """

    def __init__(
        self,
        name: str,
        image_uri: str,
        instance_type: Optional[str],
        container_local_output_path: Optional[str],
        s3_output_path: Optional[str],
        volume_size_in_gb: Optional[int],
        rule_parameters: Optional[Dict[str, str]],
        collections_to_save: Optional[List["CollectionConfig"]],
    ):
        super().__init__(
            name,
            image_uri,
            instance_type,
            container_local_output_path,
            s3_output_path,
            volume_size_in_gb,
            rule_parameters,
        )
        self.collection_configs = collections_to_save

    @classmethod
    def sagemaker(
        cls,
        base_config: Dict[str, Any],
        name: Optional[str] = None,
        container_local_output_path: Optional[str] = None,
        s3_output_path: Optional[str] = None,
        other_trials_s3_input_paths: Optional[List[str]] = None,
        rule_parameters: Optional[Dict[str, str]] = None,
        collections_to_save: Optional[List["CollectionConfig"]] = None,
    ) -> "Rule":
        """Initialize a ``Rule`` object for a built-in debugging rule.

        Args:
            base_config (dict): The base rule configuration, see :func:`builtin_rule`.
            name (str): The name of the debugger rule. Defaults to the built-in rule name.
            container_local_output_path (str): The local path in the rule processing container.
            s3_output_path (str): The location in Amazon S3 to store the output tensors.
            other_trials_s3_input_paths ([str]): S3 input paths for other trials for the rules.
            rule_parameters (dict): A dictionary of parameters for the rule.
            collections_to_save ([CollectionConfig]): Collections to be saved for the rule.

        Raises:
            RuntimeError: if ``rule_parameters`` try to override ``rule_to_invoke``.
        """
        merged_rule_params: Dict[str, str] = {}

        if rule_parameters is not None and rule_parameters.get("rule_to_invoke") is not None:
            raise RuntimeError(
                "You cannot provide a 'rule_to_invoke' for SageMaker rules. "
                "Either remove the rule_to_invoke or use a custom rule."
            )

        if other_trials_s3_input_paths is not None:
            for index, s3_input_path in enumerate(other_trials_s3_input_paths):
                merged_rule_params[f"other_trial_{index}"] = s3_input_path

        default_rule_params = base_config["DebugRuleConfiguration"].get("RuleParameters", {})
        merged_rule_params.update(default_rule_params)
        merged_rule_params.update(rule_parameters or {})

        base_config_collections = [
            CollectionConfig(name=c["CollectionName"], parameters=c.get("CollectionParameters"))
            for c in base_config.get("CollectionConfigurations", [])
        ]

        return cls(
            name=name or base_config["DebugRuleConfiguration"].get("RuleConfigurationName"),
            image_uri=DEFAULT_RULE_EVALUATOR_IMAGE,
            instance_type=None,
            container_local_output_path=container_local_output_path,
            s3_output_path=s3_output_path,
            volume_size_in_gb=None,
            rule_parameters=merged_rule_params,
            collections_to_save=collections_to_save or base_config_collections,
        )

    @classmethod
    def custom(
        cls,
        name: str,
        image_uri: str,
        instance_type: str,
        volume_size_in_gb: int,
        source: Optional[str] = None,
        rule_to_invoke: Optional[str] = None,
        container_local_output_path: Optional[str] = None,
        s3_output_path: Optional[str] = None,
        other_trials_s3_input_paths: Optional[List[str]] = None,
        rule_parameters: Optional[Dict[str, str]] = None,
        collections_to_save: Optional[List["CollectionConfig"]] = None,
    ) -> "Rule":
        """Initialize a ``Rule`` object for a custom debugging rule run from ``image_uri``."""
        merged_rule_params = cls._set_rule_parameters(source, rule_to_invoke, rule_parameters)
        if other_trials_s3_input_paths is not None:
            for index, s3_input_path in enumerate(other_trials_s3_input_paths):
                merged_rule_params[f"other_trial_{index}"] = s3_input_path

        return cls(
            name=name,
            image_uri=image_uri,
            instance_type=instance_type,
            container_local_output_path=container_local_output_path,
            s3_output_path=s3_output_path,
            volume_size_in_gb=volume_size_in_gb,
            rule_parameters=merged_rule_params,
            collections_to_save=collections_to_save or [],
        )

    def to_debugger_rule_config_dict(self) -> Dict[str, Any]:
        """Generate a request dictionary using the parameters provided when initializing the object."""
        return self._common_request_dict("RuleConfigurationName")


class ProfilerRule(RuleBase):
    """A profiler rule evaluated against the system and framework metrics of a training job."""

    @classmethod
    def sagemaker(
        cls,
        base_config: Dict[str, Any],
        name: Optional[str] = None,
        container_local_output_path: Optional[str] = None,
        s3_output_path: Optional[str] = None,
    ) -> "ProfilerRule":
        """Initialize a ``ProfilerRule`` for a built-in profiling rule, e.g. ``builtin_rule("ProfilerReport")``."""
        return cls(
            name=name or base_config["DebugRuleConfiguration"].get("RuleConfigurationName"),
            image_uri=DEFAULT_RULE_EVALUATOR_IMAGE,
            instance_type=None,
            container_local_output_path=container_local_output_path,
            s3_output_path=s3_output_path,
            volume_size_in_gb=None,
            rule_parameters=base_config["DebugRuleConfiguration"].get("RuleParameters"),
        )

    @classmethod
    def custom(
        cls,
        name: str,
        image_uri: str,
        instance_type: str,
        volume_size_in_gb: int,
        source: Optional[str] = None,
        rule_to_invoke: Optional[str] = None,
        container_local_output_path: Optional[str] = None,
        s3_output_path: Optional[str] = None,
        rule_parameters: Optional[Dict[str, str]] = None,
    ) -> "ProfilerRule":
        """Initialize a ``ProfilerRule`` for a custom profiling rule run from ``image_uri``."""
        return cls(
            name=name,
            image_uri=image_uri,
            instance_type=instance_type,
            container_local_output_path=container_local_output_path,
            s3_output_path=s3_output_path,
            volume_size_in_gb=volume_size_in_gb,
            rule_parameters=cls._set_rule_parameters(source, rule_to_invoke, rule_parameters),
        )

    def to_profiler_rule_config_dict(self) -> Dict[str, Any]:
        """Generate a request dictionary using the parameters provided when initializing the object."""
        return self._common_request_dict("RuleConfigurationName")


def get_default_profiler_rule() -> ProfilerRule:
    """The ``ProfilerReport`` rule attached to every profiled training job."""
    return ProfilerRule.sagemaker(builtin_rule(PROFILER_REPORT_RULE))


class CollectionConfig(object):
    """A named collection of tensors to save, with optional save parameters."""

    def __init__(self, name: str, parameters: Optional[Dict[str, str]] = None):
        self.name = name
        self.parameters = parameters

    def __eq__(self, other):
        if not isinstance(other, CollectionConfig):
            raise TypeError("CollectionConfig is only comparable with other CollectionConfig objects.")
        return self.name == other.name and self.parameters == other.parameters

    def __hash__(self):
        return hash((self.name, tuple(sorted((self.parameters or {}).items()))))

    def _to_request_dict(self) -> Dict[str, Any]:
        collection_config_request: Dict[str, Any] = {"CollectionName": self.name}
        if self.parameters is not None:
            collection_config_request["CollectionParameters"] = self.parameters
        return collection_config_request


class DebuggerHookConfig(object):
    """Where and how the debugger hook in the training container saves tensors."""

    def __init__(
        self,
        s3_output_path: Optional[str] = None,
        container_local_output_path: Optional[str] = None,
        hook_parameters: Optional[Dict[str, str]] = None,
        collection_configs: Optional[List[CollectionConfig]] = None,
    ):
        self.s3_output_path = s3_output_path
        self.container_local_output_path = container_local_output_path
        self.hook_parameters = hook_parameters
        self.collection_configs = collection_configs

    def _to_request_dict(self) -> Dict[str, Any]:
        debugger_hook_config_request: Dict[str, Any] = {"S3OutputPath": self.s3_output_path}

        if self.container_local_output_path is not None:
            debugger_hook_config_request["LocalPath"] = self.container_local_output_path

        if self.hook_parameters is not None:
            debugger_hook_config_request["HookParameters"] = self.hook_parameters

        if self.collection_configs is not None:
            debugger_hook_config_request["CollectionConfigurations"] = [
                collection_config._to_request_dict() for collection_config in self.collection_configs
            ]

        return debugger_hook_config_request


class TensorBoardOutputConfig(object):
    """Where the training container writes TensorBoard data, and where SageMaker uploads it."""

    def __init__(self, s3_output_path: str, container_local_output_path: Optional[str] = None):
        self.s3_output_path = s3_output_path
        self.container_local_output_path = container_local_output_path

    def _to_request_dict(self) -> Dict[str, str]:
        tensorboard_output_config_request = {"S3OutputPath": self.s3_output_path}

        if self.container_local_output_path is not None:
            tensorboard_output_config_request["LocalPath"] = self.container_local_output_path

        return tensorboard_output_config_request
