"""Indoor Mapper - Record building maps from positioning samples and route through them.

An indoor routing graph engine featuring:
- Local-frame projection of geodetic positioning samples
- Trajectory recording that turns walked paths into weighted connections
- Automatic stairs/lift linking across floors
- Shortest and alternative route search

Modules:
    core: Foundation classes (projection, live position tracking, formatting)
    model: Data structures (LocalPoint, Node, Connection, Route, BuildingMap)
    routing: Adjacency views and route search
    recording: Recording session, state machine, connection synthesis
    storage: Serialization shapes and the JSON map store

Example:
    from indoor_mapper.model.building_map import BuildingMap
    from indoor_mapper.recording import TrajectorySynthesizer
    from indoor_mapper.storage import MapStore
"""
