"""Unit tests for Rekognition resource models and request mapping."""

import pytest
from pydantic import ValidationError

from resource_provider.providers.aws.domain.rekognition.dataset import (
    Dataset,
    DatasetSource,
    DatasetType,
    GroundTruthManifest,
    dataset_type_from_arn,
    expand_create_dataset_input,
    expand_dataset_changes,
    project_name_from_arn,
)
from resource_provider.providers.aws.domain.rekognition.stream_processor import (
    ConnectedHomeSettings,
    FaceSearchSettings,
    KinesisDataStreamOutput,
    KinesisVideoStreamInput,
    Point,
    RegionOfInterest,
    StreamProcessor,
    StreamProcessorInput,
    StreamProcessorOutput,
    StreamProcessorSettings,
    expand_create_stream_processor_input,
    expand_update_stream_processor_input,
)

DATASET_ARN = "arn:aws:rekognition:us-east-1:123456789012:project/widgets/dataset/test/1690000000000"


def stream_processor(**overrides) -> StreamProcessor:
    values = {
        "name": "lobby_cam.1",
        "role_arn": "arn:aws:iam::123456789012:role/rekognition-video",
        "input": StreamProcessorInput(
            kinesis_video_stream=KinesisVideoStreamInput(
                arn="arn:aws:kinesisvideo:us-east-1:123456789012:stream/lobby/1"
            )
        ),
        "output": StreamProcessorOutput(
            kinesis_data_stream=KinesisDataStreamOutput(
                arn="arn:aws:kinesis:us-east-1:123456789012:stream/faces"
            )
        ),
        "settings": StreamProcessorSettings(
            face_search=FaceSearchSettings(collection_id="employees", face_match_threshold=90)
        ),
    }
    values.update(overrides)
    return StreamProcessor(**values)


@pytest.mark.unit
class TestDatasetModel:
    def test_source_requires_exactly_one_origin(self):
        with pytest.raises(ValidationError):
            DatasetSource()
        with pytest.raises(ValidationError):
            DatasetSource(
                ground_truth_manifest=GroundTruthManifest(bucket="bucket", name="m.json"),
                dataset_arn=DATASET_ARN,
            )

    def test_project_arn_must_be_an_arn(self):
        with pytest.raises(ValidationError):
            Dataset(project_arn="widgets", dataset_type=DatasetType.TRAIN)

    def test_dataset_type_and_project_from_arn(self):
        assert dataset_type_from_arn(DATASET_ARN) is DatasetType.TEST
        assert project_name_from_arn(DATASET_ARN) == "widgets"
        assert dataset_type_from_arn("arn:aws:rekognition:us-east-1:1:project/widgets/1") is None

    def test_expand_create_with_source_dataset(self):
        dataset = Dataset(
            project_arn="arn:aws:rekognition:us-east-1:123456789012:project/widgets/1",
            dataset_type=DatasetType.TRAIN,
            source=DatasetSource(dataset_arn=DATASET_ARN),
        )

        assert expand_create_dataset_input(dataset) == {
            "ProjectArn": "arn:aws:rekognition:us-east-1:123456789012:project/widgets/1",
            "DatasetType": "TRAIN",
            "DatasetSource": {"DatasetArn": DATASET_ARN},
        }

    def test_expand_create_with_versioned_manifest(self):
        dataset = Dataset(
            project_arn="arn:aws:rekognition:us-east-1:123456789012:project/widgets/1",
            dataset_type=DatasetType.TEST,
            source=DatasetSource(
                ground_truth_manifest=GroundTruthManifest(
                    bucket="bucket", name="manifests/test.json", version="3"
                )
            ),
        )

        source = expand_create_dataset_input(dataset)["DatasetSource"]

        assert source == {
            "GroundTruthManifest": {
                "S3Object": {"Bucket": "bucket", "Name": "manifests/test.json", "Version": "3"}
            }
        }

    def test_dataset_changes_skip_blank_lines(self):
        changes = expand_dataset_changes(['{"a": 1}\n', "  ", '{"b": 2}'])

        assert changes == {"GroundTruth": b'{"a": 1}\n{"b": 2}'}


@pytest.mark.unit
class TestStreamProcessorModel:
    @pytest.mark.parametrize("name", ["has space", "slash/name", "", "x" * 129])
    def test_invalid_names_are_rejected(self, name: str):
        with pytest.raises(ValidationError):
            stream_processor(name=name)

    def test_kms_key_id_format(self):
        assert stream_processor(kms_key_id="alias/video").kms_key_id == "alias/video"
        with pytest.raises(ValidationError):
            stream_processor(kms_key_id="-starts-with-dash")

    def test_settings_require_exactly_one_mode(self):
        with pytest.raises(ValidationError):
            StreamProcessorSettings()
        with pytest.raises(ValidationError):
            StreamProcessorSettings(
                connected_home=ConnectedHomeSettings(labels=["PERSON"]),
                face_search=FaceSearchSettings(collection_id="employees"),
            )

    def test_connected_home_labels_are_checked(self):
        with pytest.raises(ValidationError):
            ConnectedHomeSettings(labels=["CAR"])

    def test_output_requires_destination(self):
        with pytest.raises(ValidationError):
            StreamProcessorOutput()

    def test_expand_create_face_search(self):
        request = expand_create_stream_processor_input(
            stream_processor(
                regions_of_interest=[RegionOfInterest(polygon=[Point(x=0.1, y=0.2), Point(x=0.3)])]
            )
        )

        assert request["Settings"] == {
            "FaceSearch": {"CollectionId": "employees", "FaceMatchThreshold": 90}
        }
        assert request["Output"] == {
            "KinesisDataStream": {"Arn": "arn:aws:kinesis:us-east-1:123456789012:stream/faces"}
        }
        assert request["RegionsOfInterest"] == [{"Polygon": [{"X": 0.1, "Y": 0.2}, {"X": 0.3}]}]
        assert request["DataSharingPreference"] == {"OptIn": False}
        assert "Tags" not in request
        assert "NotificationChannel" not in request

    def test_update_without_changes_is_none(self):
        state = stream_processor()

        assert expand_update_stream_processor_input(state.model_copy(), state) is None

    def test_update_sets_regions_of_interest(self):
        state = stream_processor()
        plan = state.model_copy(
            update={"regions_of_interest": [RegionOfInterest(polygon=[Point(x=0.5, y=0.5)])]}
        )

        assert expand_update_stream_processor_input(plan, state) == {
            "Name": "lobby_cam.1",
            "RegionsOfInterestForUpdate": [{"Polygon": [{"X": 0.5, "Y": 0.5}]}],
        }

    @pytest.mark.parametrize("planned, current", [([], None), (None, []), ([], [])])
    def test_update_treats_empty_regions_as_unset(self, planned, current):
        state = stream_processor(regions_of_interest=current)
        plan = state.model_copy(update={"regions_of_interest": planned})

        assert expand_update_stream_processor_input(plan, state) is None

    def test_update_deletes_cleared_regions(self):
        state = stream_processor(
            regions_of_interest=[RegionOfInterest(polygon=[Point(x=0.5, y=0.5)])]
        )
        plan = state.model_copy(update={"regions_of_interest": []})

        assert expand_update_stream_processor_input(plan, state) == {
            "Name": "lobby_cam.1",
            "ParametersToDelete": ["RegionsOfInterest"],
        }
