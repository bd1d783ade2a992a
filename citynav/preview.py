"""Route preview: folium HTML map and GPX export."""

from datetime import datetime
from xml.sax.saxutils import escape

import folium
from folium import plugins

from .localizer import categorize, direction_symbol, phrase
from .models import Route


def _step_label(step, language: str) -> str:
    category = categorize(step.instruction)
    text = phrase(category, None, language)
    if step.name:
        text += f" ({step.name})"
    return f"{direction_symbol(category)} {text}"


def render_route_html(route: Route, output_path: str, language: str = "en"):
    """Save an HTML map with the route line, maneuver markers and endpoints"""
    lats = [c.lat for c in route.geometry]
    lons = [c.lon for c in route.geometry]
    center_lat = sum(lats) / len(lats)
    center_lon = sum(lons) / len(lons)

    m = folium.Map(location=[center_lat, center_lon], zoom_start=15)
    folium.TileLayer("CartoDB positron", name="Light").add_to(m)

    # Fallback routes are drawn dashed so they are not mistaken for streets
    folium.PolyLine(
        [[c.lat, c.lon] for c in route.geometry],
        weight=5,
        color="gray" if route.is_fallback else "blue",
        opacity=0.8,
        dash_array="10" if route.is_fallback else None,
        popup=f"{route.provider}: {route.distance:.0f}m, {route.duration/60:.1f} min",
    ).add_to(m)

    maneuvers = folium.FeatureGroup(name="Maneuvers", show=True)
    for i, step in enumerate(route.steps):
        if step.location is None or not step.location.is_usable:
            continue
        folium.CircleMarker(
            location=[step.location.lat, step.location.lon],
            radius=6,
            color="purple",
            fill=True,
            fill_opacity=0.8,
            popup=folium.Popup(f"<b>{i + 1}.</b> {escape(_step_label(step, language))}", max_width=250),
        ).add_to(maneuvers)
    maneuvers.add_to(m)

    start, end = route.geometry[0], route.geometry[-1]
    folium.Marker(
        location=[start.lat, start.lon],
        popup="Start",
        icon=folium.Icon(color="green", icon="play"),
    ).add_to(m)
    folium.Marker(
        location=[end.lat, end.lon],
        popup="Destination",
        icon=folium.Icon(color="red", icon="flag"),
    ).add_to(m)

    m.fit_bounds([[min(lats), min(lons)], [max(lats), max(lons)]])
    folium.LayerControl().add_to(m)
    plugins.Fullscreen().add_to(m)

    m.save(output_path)
    print(f"Route map saved to {output_path}")


def route_to_gpx(route: Route, language: str = "en") -> str:
    """GPX 1.1 document: a waypoint per maneuver and a track for the geometry"""
    timestamp = datetime.now().isoformat()
    title = f"citynav route ({route.distance/1000:.2f} km, {route.provider})"

    gpx_lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="citynav"',
        '     xmlns="http://www.topografix.com/GPX/1/1"',
        '     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
        '     xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd">',
        '  <metadata>',
        f'    <name>{escape(title)}</name>',
        f'    <time>{timestamp}</time>',
        '  </metadata>',
    ]

    for step in route.steps:
        if step.location is None or not step.location.is_usable:
            continue
        gpx_lines.append(f'  <wpt lat="{step.location.lat:.6f}" lon="{step.location.lon:.6f}">')
        gpx_lines.append(f'    <name>{escape(_step_label(step, language))}</name>')
        if step.instruction:
            gpx_lines.append(f'    <desc>{escape(step.instruction)}</desc>')
        gpx_lines.append('  </wpt>')

    gpx_lines.append('  <trk>')
    gpx_lines.append(f'    <name>{escape(title)}</name>')
    gpx_lines.append(f'    <type>{escape(route.mode.value)}</type>')
    gpx_lines.append('    <trkseg>')
    for c in route.geometry:
        gpx_lines.append(f'      <trkpt lat="{c.lat:.6f}" lon="{c.lon:.6f}"/>')
    gpx_lines.append('    </trkseg>')
    gpx_lines.append('  </trk>')
    gpx_lines.append('</gpx>')
    return '\n'.join(gpx_lines)


def save_gpx(route: Route, output_path: str, language: str = "en"):
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(route_to_gpx(route, language))
    print(f"GPX route saved to {output_path} ({len(route.geometry)} track points)")
