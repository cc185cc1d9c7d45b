import io
import os
import tempfile
import unittest

from minimarkov.models.markov import TransitionModel
from minimarkov.utils.trainer import Generator, Trainer


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestTrainer(unittest.TestCase):
    def test_feed_returns_count(self):
        model = TransitionModel()
        fed = Trainer(model).feed(["a", "b", "a"])
        self.assertEqual(fed, 3)
        self.assertEqual(model.count("a", "b"), 1)
        self.assertEqual(model.count("b", "a"), 1)

    def test_feed_nothing(self):
        self.assertEqual(Trainer(TransitionModel()).feed([]), 0)

    def test_logs_progress(self):
        trainer = Trainer(TransitionModel(), log_every=2)
        with self.assertLogs('minimarkov.utils.trainer', level='INFO') as logs:
            trainer.feed("abcde")
        self.assertEqual(len(logs.output), 2)
        self.assertIn("Fed 4 tokens", logs.output[1])

    def test_invalid_log_every(self):
        with self.assertRaises(ValueError):
            Trainer(TransitionModel(), log_every=0)

    def test_train_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "data.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write("Red fish, blue fish.\n")
            model = TransitionModel()
            with self.assertLogs('minimarkov.utils.trainer', level='INFO'):
                fed = Trainer(model).train_file(path)
        self.assertEqual(fed, 4)
        self.assertEqual(model.states, ["red", "fish", "blue"])
        self.assertEqual(model.count("fish", "blue"), 1)


class TestGenerator(unittest.TestCase):
    def setUp(self):
        self.model = TransitionModel(rng=FixedRandom(0.0))
        Trainer(self.model).feed(["x", "y", "z"])

    def test_generate_joins_tokens(self):
        self.assertEqual(Generator(self.model).generate(5), "x y z")

    def test_separator(self):
        self.assertEqual(Generator(self.model, separator="|").generate(1), "x|y")

    def test_write(self):
        out = io.StringIO()
        text = Generator(self.model).write(out, 2)
        self.assertEqual(text, "x y z")
        self.assertEqual(out.getvalue(), "x y z")

    def test_non_string_tokens(self):
        model = TransitionModel(rng=FixedRandom(0.0))
        Trainer(model).feed([1, 2, 3])
        self.assertEqual(Generator(model).generate(), "1 2 3")


if __name__ == '__main__':
    unittest.main()
