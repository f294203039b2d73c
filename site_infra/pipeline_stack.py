import logging

from aws_cdk import Stack, CfnOutput
from constructs import Construct

from .build_pipeline import BuildPipelineConstruct
from .static_site import StaticSiteConstruct

logger = logging.getLogger(__name__)


class BuildStack(Stack):
    """
    returns the stack holding the hosting resources and the pipeline publishing into them
    """

    def __init__(self, scope: Construct, construct_id: str, context: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
        logger.info("synthesizing %s from context block %s in %s", construct_id, context, self.region)

        self.site = StaticSiteConstruct(self, "site", context, self.region)
        self.build_pipeline = BuildPipelineConstruct(self, "pipeline", context, self.site.output_bucket)
        self.artifact_bucket_encryption_key = self.build_pipeline.artifact_bucket_encryption_key

        CfnOutput(self, "outputBucketName", value=self.site.output_bucket.bucket_name)
        CfnOutput(self, "distributionDomainName", value=self.site.distribution.distribution_domain_name)
