#!/usr/bin/env python3
"""
Provision the Azure environment step by step.

Runs the requested steps (all of them by default) in order:

  1 resource-group      resource group
  2 network             virtual network and subnet
  3 security-group      network security group with one inbound rule
  4 network-interface   public IP and network interface
  5 virtual-machine     virtual machine, trying fallback sizes
  6 storage             storage account and blob container
  7 blob-transfer       upload and download a sample file

Every step skips resources that already exist, so a run can be repeated
after fixing whatever made it stop.
"""

import argparse
import logging

from dotenv import load_dotenv

from cloudinfra.cloud.base_parser import create_base_parser
from cloudinfra.cloud.cloud_factory import get_cloud_api
from cloudinfra.config import Configs
from cloudinfra.errors import ConfigurationError
from cloudinfra.provisioning.credentials import get_credential_provider
from cloudinfra.steps import (
    STEPS,
    StepContext,
    run_steps,
    select_steps,
    virtual_machine,
)
from cloudinfra.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def parse_args(
    argv: list[str] | None = None, with_steps: bool = True
) -> argparse.Namespace:
    parser = create_base_parser(__doc__)
    if with_steps:
        parser.add_argument(
            "steps",
            nargs="*",
            metavar="STEP",
            help="Steps to run, by name or number (default: all)",
        )
    return parser.parse_args(argv)


def run_cli(step_names: list[str] | None, argv: list[str] | None = None) -> int:
    """Parse options, validate them and run the selected steps.

    Args:
        step_names: Fixed steps to run, or None to read them from argv
        argv: Command line arguments, defaults to sys.argv

    Returns:
        Process exit code
    """
    # .env values only fill in variables that are not already set
    load_dotenv()
    args = parse_args(argv, with_steps=step_names is None)
    setup_logging(args.log_file or None, args.logs)

    try:
        steps = select_steps(
            STEPS, step_names if step_names is not None else args.steps
        )
        configs = Configs.from_args(args)
        credentials = get_credential_provider()
        if any(step.name == virtual_machine.NAME for step in steps):
            credentials.validate()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.debug(f"Configuration: {configs.to_dict()}")
    ctx = StepContext(
        api=get_cloud_api(configs.resource_group),
        configs=configs,
        credentials=credentials,
    )
    return run_steps(steps, ctx)


def main(argv: list[str] | None = None) -> int:
    return run_cli(None, argv)


if __name__ == "__main__":
    exit(main())
