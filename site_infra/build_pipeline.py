"""
Build pipeline construct to deploy the following resources:
* CodePipeline with Source, Build and Deploy stages
* GitHub source credentials backed by a Secrets Manager token
* CodeBuild project with a CloudWatch log group
"""
import logging
from typing import Optional

from aws_cdk import Aws, SecretValue
from aws_cdk.aws_codebuild import BuildSpec, CloudWatchLoggingOptions, GitHubSourceCredentials, \
    LoggingOptions, PipelineProject
from aws_cdk.aws_codepipeline import Artifact, Pipeline
from aws_cdk.aws_codepipeline_actions import CacheControl, CodeBuildAction, GitHubSourceAction, \
    S3DeployAction
from aws_cdk.aws_iam import AccountPrincipal, PolicyStatement
from aws_cdk.aws_kms import IKey
from aws_cdk.aws_logs import LogGroup
from aws_cdk.aws_s3 import Bucket
from constructs import Construct

from .utilities import get_context, get_log_retention_days

logger = logging.getLogger(__name__)

STAGE_ORDER = ("Source", "Build", "Deploy")
REQUIRED_KEYS = ("pipeline_name", "build_project_name", "oauth_secret_name",
                 "repo_owner", "repo_name", "repo_branch")


class BuildPipelineConstruct(Construct):
    """
    returns an instance of the build pipeline construct publishing into the given bucket
    """

    def __init__(self, scope: Construct, construct_id: str, context: str, bucket: Bucket, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        context: dict = get_context(self, context, REQUIRED_KEYS)

        self.pipeline: Pipeline = Pipeline(
            self, "Pipeline",
            pipeline_name=context["pipeline_name"],
            cross_account_keys=context.get("cross_account_keys", False)
        )
        self.artifact_bucket_encryption_key: IKey = self.pipeline.artifact_bucket.encryption_key
        if self.artifact_bucket_encryption_key:
            # Other stacks may need access to the artifact bucket. Any IAM role in the
            # account can use the key, roles still need their own statements for it.
            self.artifact_bucket_encryption_key.grant(AccountPrincipal(Aws.ACCOUNT_ID), "kms:*")

        self.pipeline.add_to_role_policy(PolicyStatement(
            actions=["iam:PassRole"],
            resources=["*"]
        ))
        # pipeline executes CloudFormation changes
        self.pipeline.add_to_role_policy(PolicyStatement(
            actions=["cloudformation:*"],
            resources=["*"]
        ))

        self.oauth_token: SecretValue = SecretValue.secrets_manager(context["oauth_secret_name"])
        GitHubSourceCredentials(self, "CodeBuildGitHubCreds", access_token=self.oauth_token)

        self.project: PipelineProject = self.create_build_project(context)

        self.source_output = Artifact("source")
        self.build_output = Artifact("build")

        self.pipeline.add_stage(
            stage_name="Source",
            actions=[self.create_source_action(context)]
        )
        self.pipeline.add_stage(
            stage_name="Build",
            actions=[
                CodeBuildAction(
                    action_name="Build",
                    input=self.source_output,
                    project=self.project,
                    outputs=[self.build_output]
                )
            ]
        )
        self.pipeline.add_stage(
            stage_name="Deploy",
            actions=[self.create_deploy_action(bucket)]
        )
        logger.info("pipeline %s: %s", context["pipeline_name"], " -> ".join(STAGE_ORDER))

    def create_source_action(self, context: dict) -> GitHubSourceAction:
        logger.debug("source %s/%s@%s", context["repo_owner"], context["repo_name"], context["repo_branch"])
        return GitHubSourceAction(
            action_name="source",
            owner=context["repo_owner"],
            repo=context["repo_name"],
            branch=context["repo_branch"],
            oauth_token=self.oauth_token,
            output=self.source_output
        )

    def create_deploy_action(self, bucket: Bucket) -> S3DeployAction:
        """
        returns the action extracting the build artifact into the hosting bucket
        """
        return S3DeployAction(
            action_name="deploy-website",
            input=self.build_output,
            bucket=bucket,
            extract=True,
            cache_control=[CacheControl.no_cache()],
            run_order=1
        )

    def create_build_project(self, context: dict) -> PipelineProject:
        """
        returns the CodeBuild project, with an inline buildspec when build phases are configured
        """
        log_group = LogGroup(
            self, "build-logs",
            retention=get_log_retention_days(context.get("build_log_retention", "one_month"))
        )
        project = PipelineProject(
            self, f"{context['build_project_name']}-project",
            project_name=context["build_project_name"],
            build_spec=self.create_build_spec(context),
            logging=LoggingOptions(cloud_watch=CloudWatchLoggingOptions(log_group=log_group))
        )
        project.add_to_role_policy(PolicyStatement(
            actions=["s3:GetObject"],
            resources=["*"]
        ))
        project.add_to_role_policy(PolicyStatement(
            actions=["s3:PutObject"],
            resources=["*"]
        ))
        return project

    @staticmethod
    def create_build_spec(context: dict) -> Optional[BuildSpec]:
        """
        returns an inline buildspec built from the configured phases, None to use the repository buildspec.yml
        """
        phases: dict = context.get("build_phases") or {}
        if not phases:
            return None

        return BuildSpec.from_object({
            "version": "0.2",
            "phases": {name: {"commands": list(commands)} for name, commands in phases.items()},
            "artifacts": {
                "base-directory": context.get("artifact_base_directory", "build"),
                "files": ["**/*"]
            }
        })
