import unittest

from common.types import Header, MarkerType, Point3, Pose, ShapeKind
from copterviz.assembler import RenderFrameAssembler, geometry_from_config
from copterviz.config import VisualizationConfig


def pose(x, y=0.0, z=0.0, seq=0, frame_id="odom"):
    return Pose(position=Point3(float(x), float(y), float(z)), header=Header(frame_id=frame_id, stamp=seq * 0.1, seq=seq))


class TestRenderFrameAssembler(unittest.TestCase):
    def test_end_to_end_small_track_quad(self):
        assembler = RenderFrameAssembler(VisualizationConfig(max_track_size=3, num_rotors=4))
        frame = None
        for i in range(4):
            frame = assembler.on_pose(pose(i, seq=i + 1))
        self.assertEqual(
            list(frame.track.points),
            [Point3(1.0, 0.0, 0.0), Point3(2.0, 0.0, 0.0), Point3(3.0, 0.0, 0.0)],
        )
        self.assertEqual(len(frame.path.points), 4)
        self.assertEqual(len(frame.vehicle), 9)
        self.assertEqual(sum(m.ns == "vehicle_rotor" for m in frame.vehicle), 4)
        self.assertEqual(sum(m.ns == "vehicle_arm" for m in frame.vehicle), 4)
        self.assertEqual(sum(m.ns == "vehicle_body" for m in frame.vehicle), 1)

    def test_shape_trail_only_collects_signalled_updates(self):
        assembler = RenderFrameAssembler(VisualizationConfig())
        frame = None
        for i in range(1, 6):
            if i in (2, 5):
                assembler.on_shape("star")
            frame = assembler.on_pose(pose(i, seq=i))
        (star,) = frame.shapes
        self.assertEqual(star.ns, "shapes/star")
        self.assertEqual(list(star.points), [Point3(2.0), Point3(5.0)])
        self.assertEqual(assembler.context.trails.trail(ShapeKind.STAR), [Point3(2.0), Point3(5.0)])

    def test_triggered_trails_keep_appearing(self):
        assembler = RenderFrameAssembler()
        assembler.on_shape("heart")
        assembler.on_pose(pose(1))
        frame = assembler.on_pose(pose(2))
        self.assertEqual([m.ns for m in frame.shapes], ["shapes/heart"])
        self.assertEqual(list(frame.shapes[0].points), [Point3(1.0)])

    def test_no_shapes_until_signalled(self):
        assembler = RenderFrameAssembler()
        assembler.on_shape("hexagon")
        frame = assembler.on_pose(pose(1))
        self.assertEqual(frame.shapes, ())

    def test_pose_header_propagates(self):
        assembler = RenderFrameAssembler()
        assembler.on_shape("circle")
        p = pose(1, seq=7, frame_id="odom")
        frame = assembler.on_pose(p)
        self.assertEqual(frame.header, p.header)
        self.assertEqual(frame.track.header, p.header)
        self.assertEqual(frame.path.header, p.header)
        self.assertEqual(frame.shapes[0].header, p.header)

    def test_empty_frame_id_is_passed_through(self):
        assembler = RenderFrameAssembler(VisualizationConfig(fixed_frame_id="world"))
        assembler.on_shape("square")
        p = Pose(position=Point3(1.0), header=Header(frame_id="", stamp=1.0, seq=2))
        frame = assembler.on_pose(p)
        self.assertEqual(frame.header, p.header)
        self.assertEqual(frame.track.header, p.header)
        self.assertEqual(frame.path.header, p.header)
        self.assertEqual(frame.shapes[0].header, p.header)

    def test_vehicle_geometry_is_reused(self):
        config = VisualizationConfig(num_rotors=6)
        geometry = geometry_from_config(config)
        assembler = RenderFrameAssembler(config, geometry=geometry)
        first = assembler.on_pose(pose(1))
        second = assembler.on_pose(pose(2))
        self.assertIs(first.vehicle, second.vehicle)
        self.assertEqual(first.vehicle, geometry)

    def test_marker_styles(self):
        assembler = RenderFrameAssembler(VisualizationConfig(marker_scale=2.0))
        frame = assembler.on_pose(pose(1))
        self.assertEqual(frame.track.type, MarkerType.CUBE_LIST)
        self.assertAlmostEqual(frame.track.scale.x, 0.03)
        self.assertEqual(frame.path.type, MarkerType.LINE_STRIP)
        self.assertEqual(frame.path.scale, Point3(0.4, 0.4, 0.4))
        self.assertEqual(frame.path.orientation, (1.0, 0.0, 0.0, 0.0))
        self.assertEqual(assembler.frame_count, 1)

    def test_to_dict_is_json_ready(self):
        assembler = RenderFrameAssembler(VisualizationConfig(num_rotors=2))
        assembler.on_shape("square")
        payload = assembler.on_pose(pose(1, 2, 3, seq=1)).to_dict()
        self.assertEqual(payload["track"]["points"], [[1.0, 2.0, 3.0]])
        self.assertEqual(payload["track"]["type"], "cube_list")
        self.assertEqual(payload["shapes"][0]["ns"], "shapes/square")
        self.assertEqual(len(payload["vehicle"]), 5)
        self.assertEqual(payload["path"]["orientation"], [0.0, 0.0, 0.0, 1.0])


if __name__ == '__main__':
    unittest.main()
