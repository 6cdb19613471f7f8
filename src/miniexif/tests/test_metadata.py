#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# vim: set fileencoding=utf-8 :

import unittest
from unittest import mock

from fractions import Fraction
import datetime
import json
import os
import sys

from miniexif.convert import TimestampType
from miniexif.errors import NotFound, IsDirectory, ExternalToolError, SaveError
from miniexif.metadata import MetadataFile

from miniexif.tests.fakes import FakeExiftoolTestCase

import logging
#logging.basicConfig(level=logging.DEBUG)
log = logging.getLogger(__name__)


class test_metadata(FakeExiftoolTestCase):

    def setUp(self):
        super().setUp()
        self.file_name = self.copy_data_file('photo.jpg')
        self.org_content = self.file_name.read_bytes()

    def new_record(self, file_name=None, **kwargs):
        if file_name is None:
            file_name = self.file_name
        return MetadataFile(file_name, exiftool=self.exiftool, **kwargs)

    def test_load(self):
        photo = self.new_record()
        self.assertFalse(photo.changed())
        self.assertEqual(photo.file_name, self.file_name)
        self.assertEqual(photo.tags(), [
            'SourceFile', 'FileName', 'FileSize', 'FileModifyDate',
            'ImageSize', 'Make', 'Orientation', 'XResolution', 'ExposureTime',
            'ExposureCompensation', 'ISO', 'SerialNumber', 'DateTimeOriginal',
            'CreateDate', 'Artist', 'Keywords', 'GPSLatitude',
        ])
        self.assertEqual(photo['FileSize'], '1234 bytes')
        self.assertEqual(photo['XResolution'], 72)
        self.assertEqual(photo['ExposureTime'], Fraction(1, 60))
        self.assertEqual(photo['ExposureCompensation'], 1.5)
        self.assertIs(type(photo['ISO']), int)
        self.assertEqual(photo['ISO'], 400)
        self.assertEqual(photo['SerialNumber'], '007')
        self.assertIs(photo['CreateDate'], False)
        self.assertEqual(photo['Keywords'], ['red', 'blue'])
        self.assertEqual(photo['FileModifyDate'], datetime.datetime(
            2013, 1, 2, 10, 20, 30,
            tzinfo=datetime.timezone(datetime.timedelta(hours=1))))
        date_time_original = photo['DateTimeOriginal']
        self.assertIsNotNone(date_time_original.tzinfo)
        self.assertEqual(date_time_original.replace(tzinfo=None),
                         datetime.datetime(2005, 9, 13, 20, 8, 50))
        self.assertEqual(photo.to_dict()['Artist'], 'Jan')

    def test_load_options(self):
        photo = self.new_record(numerical=True)
        self.assertEqual(photo['FileSize'], 1234)
        self.assertEqual(photo['Orientation'], 1)
        self.assertEqual(photo['GPSLatitude'], 47.5)
        photo = self.new_record(composite=False)
        self.assertNotIn('ImageSize', photo)
        self.assertIn('Make', photo)
        photo = self.new_record(coord_format='%.2f')
        self.assertEqual(photo['GPSLatitude'], '47.50')
        photo = self.new_record(timestamps=TimestampType.naive)
        self.assertEqual(photo['DateTimeOriginal'], datetime.datetime(2005, 9, 13, 20, 8, 50))

    def test_load_errors(self):
        with self.assertRaises(NotFound):
            self.new_record(self.tmp_dir / 'missing.jpg')
        with self.assertRaises(FileNotFoundError):
            self.new_record(self.tmp_dir / 'missing.jpg')
        with self.assertRaises(IsDirectory):
            self.new_record(self.tmp_dir)
        bad_file_name = self.tmp_dir / 'bad.jpg'
        bad_file_name.write_text('not an image')
        photo = self.new_record()
        with self.assertRaises(ExternalToolError) as cm:
            photo.load(bad_file_name)
        self.assertIn('File format error', cm.exception.error_text)
        self.assertEqual(photo.tags(), [])
        self.assertFalse(photo.changed())

    def test_unsupported_option(self):
        with self.assertRaises(TypeError):
            self.new_record(numerically=True)

    def test_get_set(self):
        photo = self.new_record()
        value = datetime.datetime(2006, 1, 2, 3, 4, 5)
        photo['date_time_original'] = value
        for tag in ('DateTimeOriginal', 'datetimeoriginal', 'Date-Time-Original'):
            with self.subTest(tag=tag):
                self.assertEqual(photo[tag], value)
                self.assertEqual(photo.get(tag), value)
                self.assertTrue(photo.changed(tag))
        self.assertIs(photo.get('NoSuchTag'), None)
        with self.assertRaises(KeyError):
            photo['NoSuchTag']
        photo.set('Make', 'Canon')  # same as loaded; still staged
        self.assertTrue(photo.changed('make'))
        self.assertFalse(photo.changed('Artist'))
        self.assertTrue(photo.changed())

    def test_tag_properties(self):
        photo = self.new_record()
        self.assertEqual(photo.artist, 'Jan')
        self.assertEqual(photo.file_size, '1234 bytes')
        self.assertEqual(photo.image_size, '640x480')
        self.assertIs(photo.comment, None)
        photo.artist = 'Jane'
        self.assertTrue(photo.changed('Artist'))
        self.assertEqual(photo['artist'], 'Jane')

    def test_revert(self):
        photo = self.new_record()
        photo['Artist'] = 'Jane'
        photo['iso'] = 800
        self.assertTrue(photo.revert('ARTIST'))
        self.assertEqual(photo['Artist'], 'Jan')
        self.assertFalse(photo.changed('Artist'))
        self.assertFalse(photo.revert('Artist'))
        self.assertTrue(photo.changed())
        self.assertTrue(photo.revert())
        self.assertFalse(photo.changed())
        self.assertEqual(photo['ISO'], 400)
        self.assertFalse(photo.revert())

    def test_changed_tags(self):
        photo = self.new_record()
        photo['date_time_original'] = datetime.datetime(2006, 1, 2, 3, 4, 5)
        photo['iso'] = 800
        photo['my_private_tag'] = 1
        self.assertEqual(photo.changed_tags(), ['DateTimeOriginal', 'ISO', 'my_private_tag'])

    def test_save(self):
        photo = self.new_record()
        photo['artist'] = 'Jane "J" $Doe `x`'
        photo['iso'] = 800
        photo['keywords'] = ['green', 'yellow']
        photo['date_time_original'] = datetime.datetime(2006, 1, 2, 3, 4, 5)
        self.assertIs(photo.save(), True)
        self.assertFalse(photo.changed())
        self.assertEqual(dict(photo.errors), {})
        self.assertEqual(photo['Artist'], 'Jane "J" $Doe `x`')
        self.assertEqual(photo['ISO'], 800)
        self.assertEqual(photo['Keywords'], ['green', 'yellow'])
        self.assertEqual(photo['DateTimeOriginal'].replace(tzinfo=None),
                         datetime.datetime(2006, 1, 2, 3, 4, 5))
        self.assertNotEqual(self.file_name.read_bytes(), self.org_content)
        self.assertEqual(json.loads(self.file_name.read_text())['ISO'], '800')
        self.assertEqual(self.logged_directives(), [
            'Artist=Jane "J" $Doe `x`',
            'ISO=800',
            'Keywords=green',
            'Keywords=yellow',
            'DateTimeOriginal=2006:01:02 03:04:05',
        ])

    def test_save_unchanged(self):
        photo = self.new_record()
        self.assertIs(photo.save(), False)
        with self.assertRaises(SaveError) as cm:
            photo.save(check=True)
        self.assertEqual(str(cm.exception), "Couldn't save. The following errors occurred: None")
        self.assertEqual(cm.exception.errors, {})
        self.assertEqual(self.file_name.read_bytes(), self.org_content)
        self.assertEqual(self.logged_directives(), [])

    def test_save_partial_failure(self):
        photo = self.new_record()
        photo['Artist'] = 'A'
        photo['ImageDescription'] = 'invalid'
        photo['Make'] = 'C'
        self.assertIs(photo.save(), False)
        self.assertEqual(dict(photo.errors), {
            'ImageDescription': 'Warning: Invalid value for ImageDescription',
        })
        # No short-circuit: the tag after the failing one was attempted too
        self.assertEqual(self.logged_directives(), [
            'Artist=A',
            'ImageDescription=invalid',
            'Make=C',
        ])
        self.assertEqual(self.file_name.read_bytes(), self.org_content)
        self.assertTrue(photo.changed())
        self.assertEqual(photo['Artist'], 'A')

        with self.assertRaises(SaveError) as cm:
            photo.save(check=True)
        self.assertIn('(ImageDescription) Warning: Invalid value for ImageDescription',
                      str(cm.exception))
        self.assertEqual(cm.exception.errors, {
            'ImageDescription': 'Warning: Invalid value for ImageDescription',
        })

        photo.revert('ImageDescription')
        self.assertIs(photo.save(), True)
        self.assertEqual(dict(photo.errors), {})
        self.assertEqual(photo['Make'], 'C')

    def test_save_not_writable(self):
        photo = self.new_record()
        photo['FileSize'] = 1
        self.assertIs(photo.save(), False)
        self.assertEqual(list(photo.errors), ['FileSize'])
        self.assertIn("isn't writable", photo.errors['filesize'])

    def test_save_numerical_flag(self):
        photo = self.new_record()
        photo['XResolution'] = 300
        photo['Artist'] = 'Jane'
        photo['Orientation'] = [1, 'Horizontal (normal)']
        with mock.patch.object(self.exiftool, 'run', wraps=self.exiftool.run) as run:
            photo.save()
        write_cmdlines = [call.args[0] for call in run.call_args_list
                          if '-overwrite_original' in call.args[0]]
        self.assertEqual(len(write_cmdlines), 3)
        self.assertIn(' -n ', write_cmdlines[0])
        self.assertNotIn(' -n ', write_cmdlines[1])
        self.assertIn(' -n ', write_cmdlines[2])
        for cmdline in write_cmdlines:
            self.assertNotIn(' -m ', cmdline)

    def test_save_ignore_minor_errors(self):
        photo = self.new_record(ignore_minor_errors=True)
        photo['Artist'] = 'Jane'
        with mock.patch.object(self.exiftool, 'run', wraps=self.exiftool.run) as run:
            self.assertTrue(photo.save())
        self.assertIn(' -m ', run.call_args_list[0].args[0])

    def test_save_tag_name_is_quoted(self):
        marker = self.tmp_dir / 'marker'
        tag = 'x;touch %s;' % (marker,)
        photo = self.new_record()
        photo[tag] = 'v'
        self.assertIs(photo.save(), False)
        self.assertFalse(marker.exists())
        self.assertEqual(self.logged_directives(), [tag + '=v'])
        self.assertIn("isn't writable", photo.errors[tag])
        self.assertEqual(self.file_name.read_bytes(), self.org_content)

    def test_save_delete_tag(self):
        photo = self.new_record()
        photo['Artist'] = None
        self.assertTrue(photo.save())
        self.assertNotIn('Artist', photo)

    def test_save_keeps_timestamps(self):
        photo = self.new_record()
        date_time_original = photo['DateTimeOriginal']
        photo['Artist'] = 'Jane'
        self.assertTrue(photo.save())
        photo.reload()
        self.assertEqual(photo['DateTimeOriginal'], date_time_original)

    @unittest.skipIf(sys.platform == 'win32', 'POSIX permissions')
    def test_save_keeps_permissions(self):
        os.chmod(self.file_name, 0o640)
        photo = self.new_record()
        photo['Artist'] = 'Jane'
        self.assertTrue(photo.save())
        self.assertEqual(self.file_name.stat().st_mode & 0o777, 0o640)

    def test_save_removes_temp_files(self):
        temp_dir = self.tmp_dir / 'tmp'
        temp_dir.mkdir()
        with mock.patch('tempfile.tempdir', os.fspath(temp_dir)):
            photo = self.new_record()
            photo['Artist'] = 'Jane'
            self.assertTrue(photo.save())
            photo['ImageDescription'] = 'invalid'
            self.assertFalse(photo.save())
        self.assertEqual([p.name for p in temp_dir.iterdir()
                          if not p.name.startswith('miniexif-errors-')], [])
        self.assertEqual(sorted(p.name for p in self.tmp_dir.iterdir() if p.is_file()),
                         ['fake-exiftool.log', 'photo.jpg'])

    def test_save_in_memory(self):
        photo = MetadataFile.from_dict({'Artist': 'Jan'}, exiftool=self.exiftool)
        photo['Artist'] = 'Jane'
        with self.assertRaises(ValueError):
            photo.save()

    def test_clear_all_tags(self):
        photo = self.new_record(numerical=True)
        before_tags = photo.tags()
        photo['Artist'] = 'Jane'
        self.assertIs(photo.clear_all_tags(), True)
        self.assertNotEqual(self.file_name.read_bytes(), self.org_content)
        self.assertFalse(photo.changed())
        self.assertNotEqual(photo.tags(), before_tags)
        self.assertEqual(photo.tags(), ['SourceFile', 'FileName', 'FileSize', 'FileModifyDate'])
        self.assertEqual(self.logged_directives(), ['all='])

    def test_to_json(self):
        photo = self.new_record()
        text = photo.to_json()
        self.assertIsInstance(json.loads(text), list)
        other = MetadataFile.from_json(text, exiftool=self.exiftool)
        self.assertEqual(other.to_dict(), photo.to_dict())
        self.assertIs(other.file_name, None)
        self.assertFalse(other.changed())


class test_metadata_in_memory(unittest.TestCase):

    def test_from_dict(self):
        photo = MetadataFile.from_dict({
            'FileSize': 1234,
            'ImageSize': '640x480',
            'FileModifyDate': '2013:01:02 10:20:30+01:00',
            'ExposureTime': '1/60',
            'SerialNumber': '007',
        })
        self.assertIs(photo.composite, True)
        self.assertIs(photo.numerical, True)
        self.assertIs(photo.timestamps, TimestampType.local)
        self.assertEqual(photo['ExposureTime'], Fraction(1, 60))
        self.assertEqual(photo['SerialNumber'], '007')
        self.assertIsInstance(photo['FileModifyDate'], datetime.datetime)
        self.assertEqual(photo.tags(), ['FileSize', 'ImageSize', 'FileModifyDate',
                                        'ExposureTime', 'SerialNumber'])

    def test_from_dict_heuristic(self):
        photo = MetadataFile.from_dict({
            'FileSize': '1 kB',
            'FileModifyDate': datetime.datetime(2013, 1, 2, 10, 20, 30),
        })
        self.assertIs(photo.composite, False)
        self.assertIs(photo.numerical, False)
        self.assertIs(photo.timestamps, TimestampType.naive)

    def test_from_json(self):
        photo = MetadataFile.from_json(
            '[{"SourceFile": "a.jpg", "ISO": 400, "FNumber": "+9.50",'
            ' "DateTimeOriginal": "2005:09:13 20:08:50"}, {"SourceFile": "b.jpg"}]',
            timestamps='naive')
        self.assertEqual(photo.to_dict(), {
            'SourceFile': 'a.jpg',
            'ISO': 400,
            'FNumber': 9.5,
            'DateTimeOriginal': datetime.datetime(2005, 9, 13, 20, 8, 50),
        })
        self.assertIs(photo.file_name, None)
        self.assertEqual(str(photo), '(unnamed)')

    def test_from_json_empty(self):
        with self.assertRaises(ExternalToolError):
            MetadataFile.from_json('[]')

    def test_from_json_invalid_chars(self):
        photo = MetadataFile.from_json(b'[{"Comment": "a\xffb"}]', replace_invalid_chars='?')
        self.assertEqual(photo['Comment'], 'a?b')
        photo = MetadataFile.from_json(b'[{"Comment": "a\xffb"}]')
        self.assertEqual(photo['Comment'], 'a\xffb')

    def test_to_json_naive(self):
        photo = MetadataFile.from_dict({
            'FileModifyDate': datetime.datetime(2013, 1, 2, 10, 20, 30),
            'ExposureTime': '1/60',
        })
        other = MetadataFile.from_json(photo.to_json(), timestamps=photo.timestamps)
        self.assertEqual(other.to_dict(), photo.to_dict())

if __name__ == '__main__':
    unittest.main()
