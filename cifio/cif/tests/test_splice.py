# Licensed under the GPLv3 - see LICENSE
import pytest
import numpy as np
from numpy.testing import assert_array_equal

from ... import cif
from ...base.errors import CycleRangeError


class TestSplice:
    def setup_method(self):
        self.data = (np.arange(4 * 4 * 5) - 40).reshape(4, 4, 5)
        self.frame = cif.CIFFrame.fromdata(self.data, first_cycle=3,
                                           sample_nbytes=4)

    def test_middle(self):
        # Offset 1 and 2 are the second and third cycles.
        spliced = cif.splice(self.frame, 1, 2)
        assert spliced['first_cycle'] == 1
        assert spliced['ncycle'] == 2
        assert spliced['ncluster'] == 5
        assert spliced['sample_nbytes'] == 4
        assert_array_equal(spliced.data, self.data[1:3])
        assert_array_equal(spliced.payload.words,
                           self.frame.payload.words[20:60])

    def test_method(self):
        assert self.frame.splice(1, 2) == cif.splice(self.frame, 1, 2)

    def test_full(self):
        spliced = cif.splice(self.frame, 0, 4)
        assert_array_equal(spliced.data, self.frame.data)
        assert spliced['first_cycle'] == 1
        # Apart from first_cycle, the header is unchanged.
        spliced['first_cycle'] = 3
        assert spliced == self.frame

    def test_independent(self):
        spliced = cif.splice(self.frame, 2, 1)
        assert not np.may_share_memory(spliced.payload.words,
                                       self.frame.payload.words)
        spliced[0, 0, 0] = 1000
        assert self.frame[2, 0, 0] == self.data[2, 0, 0]
        assert spliced.header is not self.frame.header
        spliced['ncluster'] = 5
        assert self.frame['ncycle'] == 4

    def test_immutable_source(self, tmpdir):
        name = str(tmpdir.join('source.cif'))
        cif.write(name, self.frame)
        frame = cif.read(name)
        assert frame.header.mutable is False
        spliced = frame.splice(3, 1)
        assert spliced.header.mutable is True
        assert_array_equal(spliced.data, self.data[3:])

    @pytest.mark.parametrize('offset,count', [
        (0, 0), (1, -1), (-1, 2), (3, 2), (4, 1), (0, 5)])
    def test_out_of_range(self, offset, count):
        with pytest.raises(CycleRangeError):
            cif.splice(self.frame, offset, count)
        with pytest.raises(IndexError):
            self.frame.splice(offset, count)

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            cif.splice(self.frame, 1.5, 2)
