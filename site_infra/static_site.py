"""
Static site construct to deploy the following resources:
* build output bucket serving as the CloudFront origin
* access logging bucket for the distribution
* CloudFront distribution with an imported certificate and SPA error mapping
"""
import logging

from aws_cdk import Aws
from aws_cdk.aws_certificatemanager import Certificate
from aws_cdk.aws_cloudfront import Distribution, BehaviorOptions, ErrorResponse, \
    GeoRestriction, ViewerProtocolPolicy
from aws_cdk.aws_cloudfront_origins import S3BucketOrigin
from aws_cdk.aws_s3 import Bucket, BlockPublicAccess, BucketAccessControl, ObjectOwnership
from constructs import Construct

from .utilities import bucket_name, get_context, get_removal_policy

logger = logging.getLogger(__name__)

SPA_ENTRY_POINT = "/index.html"
REQUIRED_KEYS = ("project_name", "cert_arn", "domain_names")


class StaticSiteConstruct(Construct):
    """
    returns an instance of the static site construct
    """

    def __init__(self, scope: Construct, construct_id: str, context: str, region: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        context: dict = get_context(self, context, REQUIRED_KEYS)
        self.prefix: str = context['project_name'].lower()
        self.region = region

        self.output_bucket: Bucket = self.create_output_bucket()
        self.logging_bucket: Bucket = self.create_logging_bucket(context)
        self.distribution: Distribution = self.create_distribution(context)

    def create_output_bucket(self) -> Bucket:
        """
        returns the publicly readable bucket the pipeline deploys into
        """
        return Bucket(
            self,
            f"build_output_bucket_{self.region}",
            bucket_name=bucket_name("build-output", self.region, Aws.ACCOUNT_ID),
            public_read_access=True,
            block_public_access=BlockPublicAccess.BLOCK_ACLS,
            enforce_ssl=True
        )

    def create_logging_bucket(self, context: dict) -> Bucket:
        """
        returns the bucket receiving the distribution access logs
        """
        return Bucket(
            self,
            "access_logging_bucket",
            bucket_name=bucket_name("access-logging", self.region, Aws.ACCOUNT_ID),
            enforce_ssl=True,
            block_public_access=BlockPublicAccess.BLOCK_ALL,
            access_control=BucketAccessControl.LOG_DELIVERY_WRITE,
            object_ownership=ObjectOwnership.OBJECT_WRITER,
            removal_policy=get_removal_policy(context.get("log_removal_policy", "retain"))
        )

    def create_distribution(self, context: dict) -> Distribution:
        geo_allowlist = context.get("geo_allowlist") or []
        if geo_allowlist:
            logger.info("restricting %s viewers to %s", self.prefix, ", ".join(geo_allowlist))

        return Distribution(
            self,
            self.prefix,
            enabled=True,
            enable_logging=True,
            log_bucket=self.logging_bucket,
            certificate=Certificate.from_certificate_arn(
                self, "cert-arn",
                certificate_arn=context["cert_arn"]
            ),
            geo_restriction=GeoRestriction.allowlist(*geo_allowlist) if geo_allowlist else None,
            default_behavior=BehaviorOptions(
                origin=S3BucketOrigin.with_origin_access_control(self.output_bucket),
                viewer_protocol_policy=ViewerProtocolPolicy.REDIRECT_TO_HTTPS
            ),
            error_responses=[self.get_spa_error_response()],
            domain_names=list(context["domain_names"]),
            default_root_object="index.html",
        )

    @staticmethod
    def get_spa_error_response() -> ErrorResponse:
        """
        returns the error response sending forbidden paths to the single page app
        """
        return ErrorResponse(
            http_status=403,
            response_page_path=SPA_ENTRY_POINT,
            response_http_status=200
        )
