import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
import seaborn as sns
import os
from matplotlib.patches import Patch
from tabulate import tabulate

from models import RESOURCE_AXES, ResourceVector
from matcher import capacity_score, utilization_breakdown, peak_utilization


STATUS_COLORS = {
    'ok': '#4ADE80',
    'high': '#FACC15',
    'critical': '#FB923C',
    'over': '#EF4444',
}


def format_value(axis, value):
    if axis == 'dram_bw':
        return f"{value:.1f}"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


def axis_header(axis):
    info = RESOURCE_AXES[axis]
    return f"{info.label} ({info.unit})"


class Visualization:
    def __init__(self, save_dir=None):
        self.save_dir = save_dir
        if self.save_dir and not os.path.exists(self.save_dir):
            os.makedirs(self.save_dir)
            print(f"Created directory for results: {self.save_dir}")

    def save_plot(self, filename):
        if self.save_dir:
            filepath = os.path.join(self.save_dir, filename)
            plt.savefig(filepath, bbox_inches='tight')
            print(f"Saved plot to: {filepath}")
            plt.close()
            return filepath
        else:
            plt.show()
            return None

    # =========================================================================
    # CONSOLE TABLES
    # =========================================================================
    def _resource_table(self, components, name_header):
        rows = []
        for c in components:
            rows.append([c.id, c.name] + [format_value(a, getattr(c.resources, a)) for a in ResourceVector.axes()])
        headers = ["id", name_header] + [axis_header(a) for a in ResourceVector.axes()]
        return tabulate(rows, headers=headers, tablefmt="grid", showindex=False, disable_numparse=True)

    def display_data_summary(self, functions, sensors, features, socs, selection=None):
        print(f"\n Catalog Summary:")
        print(f"   - Functions: {len(functions)}")
        print(f"   - Sensors: {len(sensors)}")
        print(f"   - Features: {len(features)}")
        print(f"   - SoCs: {len(socs)}")
        if selection is not None:
            print(f"   - Selected Features: {len(selection)}")

    def display_functions(self, functions):
        print("\n" + "="*80)
        print("FUNCTIONS - Resource Requirements")
        print("="*80)
        print(self._resource_table(functions, "Function"))

    def display_sensors(self, sensors):
        print("\n" + "="*80)
        print("SENSORS - Resource Requirements")
        print("="*80)
        print(self._resource_table(sensors, "Sensor"))

    def display_features(self, features, selection=None):
        print("\n" + "="*80)
        print("FEATURES")
        print("="*80)
        selection = selection or set()
        df = pd.DataFrame([{
            'selected': 'x' if f.id in selection else '',
            'id': f.id,
            'name': f.name,
            'category': f.category.value,
            'functions': ", ".join(f.meta.mandatory_function_ids),
            'sensors': ", ".join(f.meta.mandatory_sensor_ids),
        } for f in features], columns=['selected', 'id', 'name', 'category', 'functions', 'sensors'])
        print(tabulate(df, headers="keys", tablefmt="grid", showindex=False))

    def display_socs(self, socs):
        print("\n" + "="*80)
        print("SoCs - Available Capacity")
        print("="*80)
        rows = []
        for soc in socs:
            rows.append([soc.id, soc.name, soc.vendor, soc.tier.value]
                        + [format_value(a, getattr(soc.resources, a)) for a in ResourceVector.axes()]
                        + [f"{capacity_score(soc):,.1f}"])
        headers = ["id", "SoC", "vendor", "tier"] + [axis_header(a) for a in ResourceVector.axes()] + ["score"]
        print(tabulate(rows, headers=headers, tablefmt="grid", showindex=False, disable_numparse=True))

    def display_catalog(self, functions, sensors, features, socs, selection=None):
        self.display_sensors(sensors)
        self.display_functions(functions)
        self.display_features(features, selection=selection)
        self.display_socs(socs)

    def display_requirements(self, requirements):
        """Selected features, the components they pull in and the aggregate requirement."""
        print("\n" + "="*80)
        print("REQUIREMENT SUMMARY")
        print("="*80)

        if not requirements.selected_features:
            print("\n   No features selected.")
        else:
            print(f"\n   Selected Features:")
            for feature in requirements.selected_features:
                print(f"      - {feature.name} [{feature.category.value}]: {feature.meta.description}")

        print("\n" + "-"*80)
        print("1. REQUIRED SENSORS")
        print("-"*80)
        if requirements.mandatory_sensors:
            print(self._resource_table(requirements.mandatory_sensors, "Sensor"))
        else:
            print("   None")

        print("\n" + "-"*80)
        print("2. REQUIRED FUNCTIONS")
        print("-"*80)
        if requirements.mandatory_functions:
            print(self._resource_table(requirements.mandatory_functions, "Function"))
        else:
            print("   None")

        print("\n" + "-"*80)
        print("3. TOTAL REQUIRED RESOURCES")
        print("-"*80)
        total = requirements.total_resources
        rows = [[axis_header(a), format_value(a, getattr(total, a))] for a in ResourceVector.axes()]
        print(tabulate(rows, headers=["Metric", "Required"], tablefmt="grid", showindex=False,
                       disable_numparse=True))

    def display_warnings(self, requirements):
        if requirements.unknown_feature_ids:
            print(f"   [WARN] Unknown feature ids ignored: {', '.join(requirements.unknown_feature_ids)}")
        if requirements.unresolved_function_ids:
            print(f"   [WARN] Dangling function ids ignored: {', '.join(requirements.unresolved_function_ids)}")
        if requirements.unresolved_sensor_ids:
            print(f"   [WARN] Dangling sensor ids ignored: {', '.join(requirements.unresolved_sensor_ids)}")

    def display_comparison(self, required, soc):
        """Required vs available per axis with utilization."""
        rows = []
        for row in utilization_breakdown(required, soc.resources):
            rows.append([
                axis_header(row.axis),
                format_value(row.axis, row.required),
                format_value(row.axis, row.available),
                f"{row.percent:.1f}%",
                row.status.upper(),
            ])
        print(tabulate(rows, headers=["Metric", "Required", "Available", "Utilization", "Status"],
                       tablefmt="grid", showindex=False, disable_numparse=True))

    def display_suggestion(self, requirements, match):
        print("\n" + "="*80)
        print("SoC SUGGESTION")
        print("="*80)

        if requirements.total_resources.is_zero():
            print("\n   SoC recommendations will appear here once features are selected.")
            return

        if not match.found:
            print("\n   No Suitable SoC Found")
            print("   The required resources exceed the capabilities of all available SoCs in the database.")
            print("   Consider reducing features or sourcing a more powerful chip.")
            return

        for soc in match.suitable:
            marker = " ★ BEST FIT" if soc.id == match.best_fit.id else ""
            print(f"\n▸ {soc.name} ({soc.vendor} - {soc.tier.value}){marker}")
            print(f"   Capacity score: {capacity_score(soc):,.1f} | "
                  f"Peak utilization: {peak_utilization(requirements.total_resources, soc):.1f}%")
            self.display_comparison(requirements.total_resources, soc)

    # =========================================================================
    # PLOTS
    # =========================================================================
    def plot_utilization(self, required, soc, filename=None):
        """Per-axis utilization of a single SoC, coloured by status, with a 100% line."""
        rows = utilization_breakdown(required, soc.resources)
        labels = [RESOURCE_AXES[r.axis].label for r in rows]
        percents = [r.percent for r in rows]
        colors = [STATUS_COLORS[r.status] for r in rows]

        fig, ax = plt.subplots(figsize=(10, 5))
        ax.barh(labels, percents, color=colors, edgecolor='black')
        ax.axvline(100, color='black', linestyle='--', linewidth=1)
        for y, (pct, row) in enumerate(zip(percents, rows)):
            ax.text(pct + 1, y, f"{pct:.1f}%  ({format_value(row.axis, row.required)}/"
                                f"{format_value(row.axis, row.available)})",
                    va='center', fontsize=9)
        ax.invert_yaxis()
        ax.set_xlim(0, max(110, max(percents, default=0) * 1.25))
        ax.set_xlabel('Utilization (%)', fontsize=12, fontweight='bold')
        ax.set_title(f'Resource Utilization for {soc.name}', fontsize=14, fontweight='bold')
        ax.legend(handles=[Patch(color=c, label=s) for s, c in STATUS_COLORS.items()],
                  loc='lower right', fontsize=8)
        ax.grid(True, axis='x', alpha=0.3)

        plt.tight_layout()
        return self.save_plot(filename or f"utilization_{soc.id}.png")

    def plot_soc_comparison(self, required, socs, filename="soc_comparison.png"):
        """Grouped utilization bars for several SoCs against the same requirement."""
        if not socs:
            print("No SoCs to compare")
            return None

        records = []
        for soc in socs:
            for row in utilization_breakdown(required, soc.resources):
                records.append({'SoC': soc.name, 'Resource': RESOURCE_AXES[row.axis].label,
                                'Utilization (%)': row.percent})
        df = pd.DataFrame(records)

        sns.set_style("whitegrid")
        fig, ax = plt.subplots(figsize=(14, 6))
        sns.barplot(data=df, x='Resource', y='Utilization (%)', hue='SoC', ax=ax, palette='viridis')
        ax.axhline(100, color='red', linestyle='--', linewidth=1)
        ax.set_title('Utilization per Resource across SoCs', fontsize=14, fontweight='bold')

        plt.tight_layout()
        return self.save_plot(filename)

    def plot_dependency_graph(self, features, functions, sensors, filename="dependency_graph.png"):
        """
        Feature -> Function/Sensor dependency graph. Features on the left,
        functions in the middle, sensors on the right. Dangling ids are not drawn.
        """
        G = nx.DiGraph()
        function_ids = {f.id for f in functions}
        sensor_ids = {s.id for s in sensors}

        for feature in features:
            G.add_node(feature.id, layer=0, label=feature.name, node_type='Feature')
        for func in functions:
            G.add_node(func.id, layer=1, label=func.name, node_type='Function')
        for sensor in sensors:
            G.add_node(sensor.id, layer=2, label=sensor.name, node_type='Sensor')

        for feature in features:
            for fid in feature.meta.mandatory_function_ids:
                if fid in function_ids:
                    G.add_edge(feature.id, fid)
            for sid in feature.meta.mandatory_sensor_ids:
                if sid in sensor_ids:
                    G.add_edge(feature.id, sid)

        if G.number_of_nodes() == 0:
            print("Nothing to draw")
            return None

        node_type_map = {
            'Feature': ('tab:purple', 'o'),
            'Function': ('tab:blue', 's'),
            'Sensor': ('tab:green', '^'),
        }

        pos = nx.multipartite_layout(G, subset_key='layer')
        plt.figure(figsize=(14, max(6, 0.6 * G.number_of_nodes())))
        for node_type, (color, shape) in node_type_map.items():
            nodes = [n for n, d in G.nodes(data=True) if d['node_type'] == node_type]
            nx.draw_networkx_nodes(G, pos, nodelist=nodes, node_color=color, node_shape=shape,
                                   node_size=900, alpha=0.85, label=node_type)
        nx.draw_networkx_edges(G, pos, arrows=True, arrowstyle='-|>', alpha=0.5, edge_color='gray')
        nx.draw_networkx_labels(G, pos, labels=nx.get_node_attributes(G, 'label'), font_size=8)

        plt.legend(loc='upper left', fontsize=9)
        plt.title('Feature Dependencies', fontsize=14, fontweight='bold')
        plt.axis('off')
        plt.tight_layout()
        return self.save_plot(filename)

    def generate_report(self, requirements, match, filename="adas-soc-summary.png"):
        """
        One-page summary image: selected features, required components with
        their resources, and the best-fit SoC's utilization.
        """
        if not match.found:
            print("No best-fit SoC; report not generated")
            return None

        best_fit = match.best_fit
        required = requirements.total_resources
        axes_names = ResourceVector.axes()

        fig = plt.figure(figsize=(20, 9))
        grid = fig.add_gridspec(1, 3, width_ratios=[1, 1.6, 1.2])
        fig.suptitle('ADAS SoC Selection Summary', fontsize=20, fontweight='bold')

        # Column 1: selected features
        ax_features = fig.add_subplot(grid[0, 0])
        ax_features.axis('off')
        ax_features.set_title('Selected Features', fontsize=14, fontweight='bold', loc='left')
        lines = []
        for feature in requirements.selected_features:
            lines.append(f"{feature.name}  [{feature.category.value}]")
            if feature.meta.description:
                lines.append(f"    {feature.meta.description}")
        ax_features.text(0, 1, "\n".join(lines) or "None", va='top', fontsize=10, family='monospace',
                         transform=ax_features.transAxes, wrap=True)

        # Column 2: required components
        ax_components = fig.add_subplot(grid[0, 1])
        ax_components.axis('off')
        ax_components.set_title('Required Components', fontsize=14, fontweight='bold', loc='left')
        cell_text = []
        row_labels = []
        for kind, components in (('Sensor', requirements.mandatory_sensors),
                                 ('Function', requirements.mandatory_functions)):
            for c in components:
                row_labels.append(f"{kind}: {c.name}")
                cell_text.append([format_value(a, getattr(c.resources, a)) for a in axes_names])
        row_labels.append('TOTAL')
        cell_text.append([format_value(a, getattr(required, a)) for a in axes_names])
        table = ax_components.table(cellText=cell_text, rowLabels=row_labels,
                                    colLabels=[RESOURCE_AXES[a].label for a in axes_names],
                                    loc='upper center', cellLoc='right')
        table.auto_set_font_size(False)
        table.set_fontsize(9)
        table.scale(1, 1.4)

        # Column 3: best fit utilization
        ax_util = fig.add_subplot(grid[0, 2])
        rows = utilization_breakdown(required, best_fit.resources)
        ax_util.barh([RESOURCE_AXES[r.axis].label for r in rows], [r.percent for r in rows],
                     color=[STATUS_COLORS[r.status] for r in rows], edgecolor='black')
        ax_util.axvline(100, color='black', linestyle='--', linewidth=1)
        ax_util.invert_yaxis()
        ax_util.set_xlim(0, 110)
        ax_util.set_xlabel('Utilization (%)')
        ax_util.set_title(f'Best Fit: {best_fit.name} ({best_fit.vendor} - {best_fit.tier.value})',
                          fontsize=14, fontweight='bold')

        plt.tight_layout()
        return self.save_plot(filename)
