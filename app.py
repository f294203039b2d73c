#!/usr/bin/env python3
import logging
import os

from aws_cdk import App, Environment

from site_infra.pipeline_stack import BuildStack
from site_infra.utilities import get_context, get_log_level

logging.basicConfig(level=get_log_level(os.environ.get("LOG_LEVEL", "info")),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = App()

# cdk synth -c variant=elchung-open
variant = app.node.try_get_context("variant") or "elchung"
env = get_context(app, variant, ("env",))["env"]

BuildStack(app, "infraBuildStack", variant,
           env=Environment(account=env["account"], region=env["region"]))

app.synth()
