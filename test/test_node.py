import math
import threading
import unittest

from common.interface import FramePublisher
from common.realtime import RateKeeper
from common.serve import SharedState
from common.types import Header, Point3, Pose, ShapeKind
from copterviz.config import VisualizationConfig
from copterviz.main import VisualizationNode
from copterviz.publish import SharedStatePublisher
from copterviz.source import OrbitPoseSource, QueuePoseSource


class RecordingPublisher(FramePublisher):
    def __init__(self):
        self.frames = []

    def publish(self, frame):
        self.frames.append(frame)


class FailingPublisher(FramePublisher):
    def publish(self, frame):
        raise ConnectionError("viewer gone")


class TestQueuePoseSource(unittest.TestCase):
    def test_preserves_arrival_order(self):
        source = QueuePoseSource()
        for i in range(3):
            source.push(Pose(position=Point3(float(i))))
        self.assertEqual(source.pending(), 3)
        self.assertEqual([source.read(0).position.x for _ in range(3)], [0.0, 1.0, 2.0])
        self.assertIsNone(source.read(timeout=0.01))


class TestOrbitPoseSource(unittest.TestCase):
    def test_pose_lies_on_circle(self):
        feed = OrbitPoseSource(radius=2.0, altitude=1.5, angular_rate=1.0, frame_id="map")
        p = feed.pose_at(math.pi / 2)
        self.assertAlmostEqual(p.position.x, 0.0)
        self.assertAlmostEqual(p.position.y, 2.0)
        self.assertEqual(p.position.z, 1.5)
        self.assertEqual(p.header.frame_id, "map")
        self.assertEqual(feed.pose_at(1.0).header.seq, 1)

    def test_shape_schedule_cycles_kinds(self):
        feed = OrbitPoseSource(shape_every=3)
        kinds = [feed.shape_for_tick(t) for t in range(0, 22)]
        fired = [k for k in kinds if k is not None]
        self.assertEqual(fired, list(ShapeKind) + [ShapeKind.TRIANGLE])
        self.assertIsNone(OrbitPoseSource().shape_for_tick(40))

    def test_run_stops_on_event(self):
        feed = OrbitPoseSource()
        stop = threading.Event()
        poses = []

        def on_pose(p):
            poses.append(p)
            if len(poses) == 3:
                stop.set()

        feed.run(on_pose, lambda token: True, stop, rate_hz=200.0)
        self.assertEqual(len(poses), 3)


class TestRateKeeper(unittest.TestCase):
    def test_rejects_non_positive_rate(self):
        with self.assertRaises(ValueError):
            RateKeeper(0.0)

    def test_sleeps_remaining_time(self):
        now = [0.0]
        slept = []
        rk = RateKeeper(10.0, clock=lambda: now[0])
        now[0] = 0.04
        rk.keep_time(sleep=slept.append)
        self.assertAlmostEqual(slept[0], 0.06)
        self.assertEqual(rk.frame, 1)


class TestVisualizationNode(unittest.TestCase):
    def test_step_assembles_and_publishes(self):
        recorder = RecordingPublisher()
        node = VisualizationNode(VisualizationConfig(max_track_size=2), publishers=[FailingPublisher(), recorder])
        self.assertIsNone(node.step(timeout=0.01))
        node.submit_shape("pentagon")
        for i in range(3):
            node.submit_pose(Pose(position=Point3(float(i)), header=Header(frame_id="map", seq=i)))
        for _ in range(3):
            node.step(timeout=0.01)
        self.assertEqual(len(recorder.frames), 3)
        last = recorder.frames[-1]
        self.assertEqual(list(last.track.points), [Point3(1.0), Point3(2.0)])
        self.assertEqual([m.ns for m in last.shapes], ["shapes/pentagon"])
        self.assertEqual(list(last.shapes[0].points), [Point3(0.0)])

    def test_config_is_used_as_given(self):
        config = VisualizationConfig.from_env({"COPTERVIZ_NUM_ROTORS": "4"})
        node = VisualizationNode(config)
        self.assertIs(node.config, config)
        self.assertIs(node.assembler.config, config)
        self.assertEqual(len(node.assembler.vehicle), 9)

    def test_shared_state_publisher_snapshots(self):
        shared = SharedState()
        node = VisualizationNode(VisualizationConfig(num_rotors=3), publishers=[SharedStatePublisher(shared)])
        node.submit_pose(Pose(position=Point3(1.0, 2.0, 3.0), header=Header(frame_id="map")))
        node.step(timeout=0.01)
        snapshot = shared.get_frame()
        self.assertEqual(snapshot["frame"], 0)
        self.assertEqual(snapshot["path"]["points"], [[1.0, 2.0, 3.0]])
        self.assertEqual(len(shared.get_vehicle()), 7)


if __name__ == '__main__':
    unittest.main()
