"""Shared pytest fixtures: synthesize BuildStack from an in-memory context block."""

import copy

import pytest
from aws_cdk import App, Environment
from aws_cdk.assertions import Template

from site_infra.pipeline_stack import BuildStack

ACCOUNT = "123456789012"
REGION = "us-west-2"
CERT_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/00000000-0000-0000-0000-000000000000"

SITE_CONTEXT = {
    "project_name": "Example",
    "env": {"account": ACCOUNT, "region": REGION},
    "pipeline_name": "example-build-pipeline",
    "build_project_name": "example-pipeline-project",
    "cross_account_keys": False,
    "oauth_secret_name": "example-oauth",
    "repo_owner": "example",
    "repo_name": "example.com",
    "repo_branch": "main",
    "cert_arn": CERT_ARN,
    "domain_names": ["example.com", "www.example.com"],
    "geo_allowlist": ["US", "CA"],
    "log_removal_policy": "retain",
    "build_log_retention": "one_month",
}


def synth_stack(**overrides) -> BuildStack:
    context = copy.deepcopy(SITE_CONTEXT)
    context.update(overrides)
    app = App(context={"site": context})
    return BuildStack(app, "TestBuildStack", "site", env=Environment(account=ACCOUNT, region=REGION))


@pytest.fixture
def site_context() -> dict:
    return copy.deepcopy(SITE_CONTEXT)


@pytest.fixture
def stack() -> BuildStack:
    return synth_stack()


@pytest.fixture
def template(stack) -> Template:
    return Template.from_stack(stack)


@pytest.fixture
def pipeline_stages(template) -> list:
    pipelines = template.find_resources("AWS::CodePipeline::Pipeline")
    assert len(pipelines) == 1
    return next(iter(pipelines.values()))["Properties"]["Stages"]
