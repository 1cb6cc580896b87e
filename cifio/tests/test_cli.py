# Licensed under the GPLv3 - see LICENSE
import pytest
import numpy as np
from numpy.testing import assert_array_equal
from click.testing import CliRunner

from .. import cif
from ..cli import main
from ..data import SAMPLE_CIF as SAMPLE_FILE


@pytest.fixture
def runner():
    return CliRunner()


def write_run(tmpdir, cycles, ncluster=2):
    lane_dir = tmpdir.join('Data', 'Intensities', 'L001')
    for cycle in cycles:
        data = np.full((1, 4, ncluster), cycle, dtype='i1')
        name = lane_dir.ensure('C{}.1'.format(cycle), dir=True).join(
            's_1_1101.cif')
        cif.write(str(name), cif.CIFFrame.fromdata(data, first_cycle=cycle))


class TestCommands:
    def test_header(self, runner):
        result = runner.invoke(main, ['header', SAMPLE_FILE])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "magic = b'CIF'",
            "version = 1",
            "sample_nbytes = 2",
            "first_cycle = 1",
            "ncycle = 2",
            "ncluster = 3"]

    def test_dump(self, runner):
        result = runner.invoke(main, ['dump', SAMPLE_FILE,
                                      '--clusters', '1', '--cycles', '1'])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "@CIF Data version = 1"
        assert lines[5] == "cluster_1\tA  -400"
        assert lines[-1] == "2 clusters omitted. 1 cycles omitted. "

    @pytest.mark.parametrize('option', ('--clusters', '--cycles'))
    def test_dump_negative_limit(self, runner, option):
        result = runner.invoke(main, ['dump', SAMPLE_FILE, option, '-1'])
        assert result.exit_code == 2
        assert '@CIF' not in result.output

    def test_not_cif(self, runner, tmpdir):
        name = tmpdir.join('bad.cif')
        name.write_binary(b'BAM\x01')
        result = runner.invoke(main, ['dump', str(name)])
        assert result.exit_code == 1
        assert 'not a CIF file' in result.output

    def test_compressed(self, runner, tmpdir):
        name = tmpdir.join('sample.cif.gz')
        name.write_binary(b'')
        result = runner.invoke(main, ['header', str(name)])
        assert result.exit_code == 1
        assert "'gzip'" in result.output
        result = runner.invoke(main, ['header', SAMPLE_FILE,
                                      '--encoding', 'bzip2'])
        assert result.exit_code == 1

    def test_splice(self, runner, tmpdir):
        output = str(tmpdir.join('spliced.cif'))
        result = runner.invoke(main, ['splice', SAMPLE_FILE, '--offset', '1',
                                      '--count', '1', '-o', output])
        assert result.exit_code == 0, result.output
        frame = cif.read(output)
        assert frame['ncycle'] == 1
        assert_array_equal(frame.data, cif.read(SAMPLE_FILE).data[1:])
        result = runner.invoke(main, ['splice', SAMPLE_FILE, '--offset', '1',
                                      '--count', '2', '-o', output])
        assert result.exit_code == 1
        assert 'outside' in result.output

    def test_aggregate(self, runner, tmpdir):
        names = []
        for cycle in (2, 1):
            data = np.full((1, 4, 3), cycle * 10, dtype='i2')
            name = str(tmpdir.join('c{}.cif'.format(cycle)))
            cif.write(name, cif.CIFFrame.fromdata(data, first_cycle=cycle))
            names.append(name)
        output = str(tmpdir.join('combined.cif'))
        result = runner.invoke(main, ['aggregate'] + names
                               + ['-n', '3', '-o', output])
        assert result.exit_code == 0, result.output
        frame = cif.read(output)
        assert frame.shape == (3, 4, 3)
        assert_array_equal(frame.data[:, 0, 0], [10, 20, 0])
        result = runner.invoke(main, ['aggregate'] + names
                               + ['-n', '3', '--complete', '-o', output])
        assert result.exit_code == 1
        result = runner.invoke(main, ['aggregate'] + names + names
                               + ['-n', '3', '-o', output])
        assert result.exit_code == 1
        assert 'already filled' in result.output

    def test_gather(self, runner, tmpdir):
        write_run(tmpdir, [1, 3, 2])
        output = str(tmpdir.join('gathered.cif'))
        result = runner.invoke(main, ['gather', str(tmpdir), '-l', '1',
                                      '-t', '1101', '-o', output])
        assert result.exit_code == 0, result.output
        frame = cif.read(output)
        assert frame['ncycle'] == 3
        assert_array_equal(frame.data[:, 0, 0], [1, 2, 3])
        result = runner.invoke(main, ['gather', str(tmpdir), '-l', '1',
                                      '-t', '1102', '-o', output])
        assert result.exit_code == 1
        assert 'no files match' in result.output
        result = runner.invoke(main, ['gather', str(tmpdir), '-l', '11',
                                      '-t', '1101', '-o', output])
        assert result.exit_code == 1
