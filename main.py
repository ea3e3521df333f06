#!/usr/bin/env python3
"""
ADAS SoC Selection Pipeline

Main script that orchestrates the entire workflow:
1. Load the catalog (configuration, saved session, imported portfolio or synthetic data)
2. Resolve the selected features into mandatory functions/sensors and total resources
3. Match the total against the SoC catalog and report the best fit
"""
import argparse
import os
from config_reader import ConfigReader
from data_generator import CatalogGenerator
from portfolio import KINDS, export_session, import_into
from resolver import RequirementResolver
from matcher import SoCMatcher
from session import Session
from visualizer import Visualization


def _split_ids(values):
    ids = []
    for value in values or []:
        ids.extend(v.strip() for v in value.split(',') if v.strip())
    return ids


def build_session(args, config_reader):
    if args.state:
        print(f"Loading saved session: {args.state}")
        return Session.load(args.state, default_socs=config_reader.get_socs())

    if args.synthetic:
        generator = CatalogGenerator(num_functions=args.num_functions, num_sensors=args.num_sensors,
                                     num_features=args.num_features, num_socs=args.num_socs,
                                     seed=args.seed, config_reader=config_reader)
        functions, sensors, features, socs = generator.generate_data()
        return Session(functions=functions, sensors=sensors, features=features, socs=socs)

    return Session.defaults(config_reader)


def main(args):
    print("=" * 80)
    print("ADAS SoC SELECTION PIPELINE")
    print("=" * 80)

    config_reader = ConfigReader(args.config_dir)

    # Step 1: Load catalog
    print("\n" + "-" * 80)
    print("STEP 1: Loading Catalog")
    print("-" * 80)

    session = build_session(args, config_reader)
    if args.import_file:
        count = import_into(session, args.import_file, args.import_kind)
        print(f"Imported {count} {args.import_kind} entries from {args.import_file}")

    if args.all_features:
        session.selected_feature_ids = {f.id for f in session.features}
    for feature_id in _split_ids(args.features):
        session.selected_feature_ids.add(feature_id)

    visualizer = Visualization(save_dir=args.output_dir)
    visualizer.display_data_summary(session.functions, session.sensors, session.features, session.socs,
                                    selection=session.selection)
    if args.verbose:
        visualizer.display_catalog(session.functions, session.sensors, session.features, session.socs,
                                   selection=session.selection)

    # Step 2: Resolve requirements
    print("\n" + "-" * 80)
    print("STEP 2: Resolving Feature Requirements")
    print("-" * 80)

    evaluation = session.evaluate(RequirementResolver(), SoCMatcher())
    requirements = evaluation.requirements
    visualizer.display_warnings(requirements)
    visualizer.display_requirements(requirements)

    # Step 3: Match SoCs
    print("\n" + "-" * 80)
    print("STEP 3: Matching SoCs")
    print("-" * 80)

    match = evaluation.match
    print(f"   Suitable SoCs: {len(match.suitable)} / {len(session.socs)}")
    if match.found:
        print(f"   Best fit: {match.best_fit.name} ({match.best_fit.vendor} - {match.best_fit.tier.value})")
    visualizer.display_suggestion(requirements, match)

    if args.plots:
        visualizer.plot_dependency_graph(requirements.selected_features, requirements.mandatory_functions,
                                         requirements.mandatory_sensors)
        visualizer.plot_soc_comparison(requirements.total_resources, session.socs)
        if match.found:
            visualizer.plot_utilization(requirements.total_resources, match.best_fit)

    if args.report:
        visualizer.generate_report(requirements, match)

    if args.export_dir:
        for path in export_session(session, args.export_dir, fmt=args.export_format):
            print(f"Exported portfolio to: {path}")

    if args.save_state:
        session.save(args.save_state)
        print(f"Saved session to: {args.save_state}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETED SUCCESSFULLY")
    print("=" * 80)
    return evaluation


def build_parser():
    argparser = argparse.ArgumentParser(description="ADAS SoC Selection Pipeline")
    argparser.add_argument("--config_dir", type=str, default=os.path.join(os.path.dirname(os.path.abspath(__file__)), "configs"), help="Directory containing configuration JSON files")
    argparser.add_argument("--features", action="append", help="Feature ids to select (repeatable, or comma-separated)")
    argparser.add_argument("--all_features", action="store_true", help="Select every feature in the catalog")
    argparser.add_argument("--state", type=str, default=None, help="Load a saved session JSON instead of the config catalog")
    argparser.add_argument("--save_state", type=str, default=None, help="Save the session (catalog + selection) to this JSON file")
    argparser.add_argument("--synthetic", action="store_true", help="Use a randomly generated catalog")
    argparser.add_argument("--num_functions", type=int, default=12, help="Number of synthetic functions")
    argparser.add_argument("--num_sensors", type=int, default=5, help="Number of synthetic sensors")
    argparser.add_argument("--num_features", type=int, default=6, help="Number of synthetic features")
    argparser.add_argument("--num_socs", type=int, default=5, help="Number of synthetic SoCs")
    argparser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    argparser.add_argument("--import_kind", type=str, default="socs", choices=KINDS, help="Portfolio kind for --import_file")
    argparser.add_argument("--import_file", type=str, default=None, help="Portfolio file (.json/.csv/.xlsx) replacing that catalog")
    argparser.add_argument("--export_dir", type=str, default=None, help="Export all portfolios to this directory")
    argparser.add_argument("--export_format", type=str, default="xlsx", choices=["xlsx", "csv", "json"], help="Portfolio export format")
    argparser.add_argument("--output_dir", type=str, default="results", help="Directory to save plots and reports")
    argparser.add_argument("--plots", action="store_true", help="Save dependency and utilization plots")
    argparser.add_argument("--report", action="store_true", help="Save a summary report image")
    argparser.add_argument("--verbose", action="store_true", help="Print the full catalog")
    return argparser


def cli(argv=None):
    args = build_parser().parse_args(argv)
    main(args)


if __name__ == "__main__":
    cli()
