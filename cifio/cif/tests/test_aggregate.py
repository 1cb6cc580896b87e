# Licensed under the GPLv3 - see LICENSE
import io

import pytest
import numpy as np
from numpy.testing import assert_array_equal

from ... import cif
from ...base.errors import (CIFError, BoundsError, ConsistencyError,
                            OverlapError, FormatError)
from ...data import SAMPLE_CIF as SAMPLE_FILE


def make_frame(first_cycle, ncycle, ncluster=3, sample_nbytes=1, start=1):
    data = (np.arange(ncycle * 4 * ncluster) + start).reshape(
        ncycle, 4, ncluster)
    return cif.CIFFrame.fromdata(data, first_cycle=first_cycle,
                                 sample_nbytes=sample_nbytes)


class TestAggregate:
    def setup_method(self):
        # Two single-cycle frames, as written by an instrument.
        self.frame1 = make_frame(1, 1, start=1)
        self.frame2 = make_frame(2, 1, start=13)

    def write_cycle_files(self, tmpdir, frames):
        names = []
        for frame in frames:
            name = str(tmpdir.join('cycle{}.cif'.format(frame['first_cycle'])))
            cif.write(name, frame)
            names.append(name)
        return names

    def test_two_cycles(self, tmpdir):
        names = self.write_cycle_files(tmpdir, [self.frame1, self.frame2])
        frame = cif.aggregate(names, 2)
        assert frame['first_cycle'] == 1
        assert frame['ncycle'] == 2
        assert frame['ncluster'] == 3
        assert frame['sample_nbytes'] == 1
        assert_array_equal(frame.payload.words[:12], np.arange(1, 13))
        assert_array_equal(frame.payload.words[12:], np.arange(13, 25))

    def test_order_independent(self, tmpdir):
        names = self.write_cycle_files(tmpdir, [self.frame1, self.frame2])
        frame = cif.aggregate(names, 2)
        frame_reversed = cif.aggregate(names[::-1], 2)
        assert frame_reversed == frame

    def test_same_as_direct_encoding(self, tmpdir):
        # Combining files gives the same bytes as writing all cycles at once.
        frame = make_frame(1, 5, ncluster=7, sample_nbytes=2, start=-70)
        parts = [cif.splice(frame, 0, 2), cif.splice(frame, 2, 1),
                 cif.splice(frame, 3, 2)]
        for part, first_cycle in zip(parts, (1, 3, 4)):
            part['first_cycle'] = first_cycle
        names = self.write_cycle_files(tmpdir, parts)
        combined = cif.aggregate(names, 5)
        direct = io.BytesIO()
        cif.write(direct, frame)
        aggregated = io.BytesIO()
        cif.write(aggregated, combined)
        assert aggregated.getvalue() == direct.getvalue()

    @pytest.mark.parametrize('sample_nbytes', (1, 2, 4))
    def test_single_cycles_same_as_direct(self, sample_nbytes):
        frame = make_frame(1, 4, ncluster=5, sample_nbytes=sample_nbytes,
                           start=-40)
        singles = []
        for cycle in range(4):
            single = cif.splice(frame, cycle, 1)
            single['first_cycle'] = cycle + 1
            fh = io.BytesIO()
            cif.write(fh, single)
            fh.seek(0)
            singles.append(fh)
        combined = cif.aggregate(singles[::-1], 4, complete=True)
        assert combined == frame
        assert combined.payload.words.tobytes() == (
            frame.payload.words.tobytes())

    def test_sources(self, tmpdir):
        name = self.write_cycle_files(tmpdir, [self.frame2])[0]
        fh = io.BytesIO()
        cif.write(fh, self.frame1)
        fh.seek(0)
        aggregator = cif.CIFAggregator(3)
        assert aggregator.header is None
        assert aggregator.nfilled == 0
        assert aggregator.missing_cycles == [1, 2, 3]
        assert aggregator.add(fh) is aggregator
        assert not fh.closed
        assert aggregator.nfilled == 1
        aggregator.add(name, encoding='raw')
        assert aggregator.header['ncycle'] == 3
        assert aggregator.missing_cycles == [3]
        frame = aggregator.result()
        assert frame.shape == (3, 4, 3)
        assert_array_equal(frame.data[:2].ravel(), np.arange(1, 25))
        # Missing cycle is left zero.
        assert np.all(frame.data[2] == 0)
        # Aggregator cannot be reused.
        with pytest.raises(ValueError, match='finished'):
            aggregator.add(self.frame1)
        with pytest.raises(ValueError):
            aggregator.result()

    def test_frames_copied(self):
        aggregator = cif.CIFAggregator(2)
        aggregator.add(self.frame1).add(self.frame2)
        frame = aggregator.result()
        self.frame1[0, 0, 0] = 100
        assert frame[0, 0, 0] == 1
        assert not np.may_share_memory(frame.payload.words,
                                       self.frame2.payload.words)

    def test_complete(self):
        frame = cif.aggregate([self.frame1, self.frame2], 2, complete=True)
        assert frame['ncycle'] == 2
        aggregator = cif.CIFAggregator(3)
        aggregator.add(self.frame1).add(self.frame2)
        with pytest.raises(ConsistencyError, match=r'\[3\]'):
            aggregator.result(complete=True)
        assert aggregator._payload is None
        with pytest.raises(ValueError, match='aborted'):
            aggregator.result()

    @pytest.mark.parametrize('kwargs', [
        dict(ncluster=4),
        dict(sample_nbytes=2)])
    def test_inconsistent(self, kwargs):
        aggregator = cif.CIFAggregator(2)
        aggregator.add(self.frame1)
        other = make_frame(2, 1, **kwargs)
        with pytest.raises(ConsistencyError):
            aggregator.add(other)
        # Everything is discarded.
        assert aggregator._payload is None
        assert aggregator.header is None
        with pytest.raises(ValueError, match='aborted'):
            aggregator.add(self.frame2)
        with pytest.raises(ValueError, match='aborted'):
            aggregator.result()

    def test_inconsistent_file_not_read(self, tmpdir):
        # Header of a file is checked before its intensities are read.
        other = make_frame(2, 1, ncluster=4)
        fh = io.BytesIO()
        cif.write(fh, other)
        # Truncate, so reading the payload would fail with EOFError.
        fh = io.BytesIO(fh.getvalue()[:20])
        aggregator = cif.CIFAggregator(2)
        aggregator.add(self.frame1)
        with pytest.raises(ConsistencyError):
            aggregator.add(fh)

    def test_inconsistent_version(self):
        aggregator = cif.CIFAggregator(2)
        aggregator.add(self.frame1)
        header = self.frame2.header.copy()
        header['version'] = 2
        with pytest.raises(ConsistencyError):
            aggregator._prepare(header)

    @pytest.mark.parametrize('first_cycle,ncycle', [
        (3, 1), (2, 2), (0, 1)])
    def test_bounds(self, first_cycle, ncycle):
        aggregator = cif.CIFAggregator(2)
        with pytest.raises(BoundsError):
            aggregator.add(make_frame(first_cycle, ncycle))
        assert aggregator._payload is None
        with pytest.raises(IndexError):
            cif.aggregate([self.frame1, make_frame(first_cycle, ncycle)], 2)

    def test_overlap(self):
        with pytest.raises(OverlapError):
            cif.aggregate([self.frame1, self.frame1], 2)
        with pytest.raises(ConsistencyError, match=r'\[2\]'):
            cif.aggregate([make_frame(1, 2), self.frame2], 2)
        replacement = make_frame(2, 1, start=50)
        with pytest.warns(UserWarning, match='overwriting'):
            frame = cif.aggregate([self.frame1, self.frame2, replacement], 2,
                                  allow_overlap=True)
        assert_array_equal(frame.data[1].ravel(), np.arange(50, 62))

    def test_bad_file_aborts(self, tmpdir):
        names = self.write_cycle_files(tmpdir, [self.frame1, self.frame2])
        with open(names[1], 'r+b') as fh:
            fh.write(b'BAM')
        aggregator = cif.CIFAggregator(2)
        aggregator.add(names[0])
        with pytest.raises(FormatError):
            aggregator.add(names[1])
        assert aggregator._payload is None
        with open(names[1], 'r+b') as fh:
            fh.write(b'CIF')
            fh.truncate(20)
        with pytest.raises(EOFError):
            cif.aggregate(names, 2)
        with pytest.raises(FileNotFoundError):
            cif.aggregate([names[0], str(tmpdir.join('nonexistent.cif'))], 2)

    def test_sample_file(self):
        frame = cif.read(SAMPLE_FILE)
        combined = cif.aggregate([SAMPLE_FILE], 4)
        assert combined['ncycle'] == 4
        assert combined.dtype == np.dtype('<i2')
        assert_array_equal(combined.data[:2], frame.data)
        assert np.all(combined.data[2:] == 0)

    def test_no_clusters(self):
        empty = cif.CIFFrame.fromdata(np.zeros((1, 4, 0), dtype='i1'))
        frame = cif.aggregate([empty], 1)
        assert frame == empty
        fh = io.BytesIO()
        cif.write(fh, cif.CIFFrame.fromdata(np.zeros((2, 4, 0), dtype='i1'),
                                            first_cycle=2))
        fh.seek(0)
        frame = cif.aggregate([empty, fh], 3, complete=True)
        assert frame.shape == (3, 4, 0)
        assert frame['sample_nbytes'] == 1

    def test_invalid(self):
        with pytest.raises(ValueError):
            cif.CIFAggregator(0)
        with pytest.raises(TypeError):
            cif.CIFAggregator(2.5)
        with pytest.raises(ValueError, match='no frames'):
            cif.CIFAggregator(2).result()
        assert issubclass(OverlapError, CIFError)
