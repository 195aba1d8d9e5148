from unittest import TestCase
from coalescer import validation as mdl


class TestCheckOption(TestCase):
    def test_all(self):
        assert mdl.check_option("medal", 1, [1, 2, 3]) == 1
        assert mdl.check_option("medal", -1, [1, 2, 3], ignore_list=[-1]) == -1
        with self.assertRaisesRegex(mdl.InvalidOptionValue, r"medal=4"):
            mdl.check_option("medal", 4, [1, 2, 3])


class TestChoices(TestCase):
    def test_all(self):
        @mdl.choices("color", ["red", "green"])
        def paint(surface, color="blue"):
            """
            :param color: The paint color.
            """
            return (surface, color)

        assert paint("wall") == ("wall", "blue")
        assert paint("wall", "red") == ("wall", "red")
        assert paint("wall", color="green") == ("wall", "green")
        with self.assertRaises(mdl.ParameterChoiceError):
            paint("wall", "blue")
        with self.assertRaises(ValueError):
            paint("wall", color="pink")

        assert "['red', 'green']" in paint.__doc__

    def test_no_doc(self):
        @mdl.choices("color", ["red"], doc=False)
        def paint(color="red"):
            """
            :param color: The paint color.
            """

        assert "['red']" not in paint.__doc__
