"""Static name tables for odf property containers.

The binary format stores property names only as 32-bit hashes. The
reverse table is built once at import time by hashing every known name.
"""

from __future__ import annotations

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_hash(name: str) -> int:
    """ZeroEngine name hash: 32-bit FNV-1a over the lowercased bytes."""
    h = FNV_OFFSET_BASIS
    for byte in name.encode("latin-1"):
        h ^= byte | 0x20
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


# ClassLabel values: BASE strings naming an engine class rather than a parent odf
CLASS_LABELS: frozenset[str] = frozenset(
    {
        "animatedbuilding",
        "animatedprop",
        "armedbuilding",
        "armedbuildingdynamic",
        "beacon",
        "binoculars",
        "bolt",
        "building",
        "bullet",
        "cannon",
        "catapult",
        "claw",
        "cloudcluster",
        "commandarmedanimatedbuilding",
        "commandhover",
        "commandpost",
        "commandwalker",
        "destructablebuilding",
        "detonator",
        "disguise",
        "dispenser",
        "door",
        "droid",
        "emitter",
        "emitterordnance",
        "explosion",
        "flyer",
        "grapplinggun",
        "grenade",
        "hover",
        "launcher",
        "leafpatch",
        "melee",
        "mine",
        "minigun",
        "missile",
        "ordnancetowcable",
        "powerupitem",
        "powerupstation",
        "prop",
        "remote",
        "repair",
        "rifle",
        "shell",
        "shield",
        "soldier",
        "sticky",
        "towcable",
        "vehiclepad",
        "vehiclespawn",
        "walker",
        "walkerdroid",
        "weapon",
    }
)


PROPERTY_NAMES: tuple[str, ...] = (
    # Common
    "ClassLabel",
    "ClassParent",
    "GeometryName",
    "GeometryLowRes",
    "FirstPersonFOV",
    "ThirdPersonFOV",
    "HealthType",
    "MaxHealth",
    "MaxShield",
    "AddHealth",
    "AddShield",
    "MapTexture",
    "MapScale",
    "MapViewMin",
    "MapViewMax",
    "MapSpeedMin",
    "MapSpeedMax",
    "HUDTag",
    "IconTexture",
    "AnimationName",
    "Animation",
    "SkeletonName",
    "SkeletonLowRes",
    "AnimatedAddon",
    "FoleyFXClass",
    "FoleyFXGroup",
    "CollisionScale",
    "CollisionSound",
    "CollisionThreshold",
    "CollisionInflict",
    "Label",
    "Lighting",
    "TerrainCollision",
    "TerrainLeft",
    "TerrainRight",
    "TerrainTop",
    "TerrainBottom",
    "BuildingCollision",
    "VehicleCollision",
    "OrdnanceCollision",
    "SoldierCollision",
    "TargetableCollision",
    "ExplosionName",
    "Explosion",
    "ExplosionDeath",
    "DestroyedGeometryName",
    "DestructableBuilding",
    "DeathSound",
    "DamageStartPercent",
    "DamageStopPercent",
    "DamageEffect",
    "DamageAttachPoint",
    "DamageAttachPointType",
    "DamageRegion",
    "DamageInheritVelocity",
    "PhysicsType",
    "Mass",
    "Scale",
    "Radius",
    "Height",
    "Width",
    "Length",
    "Team",
    "IsVehicle",
    "IsLowRes",
    "Name",
    "NameTag",
    "Category",
    "ModelScale",
    "LODFadeDist",
    "FadeDist",
    "AttachOdf",
    "AttachToHardPoint",
    "AttachDynamic",
    "AttachEffect",
    "AttachTrigger",
    "AmbientSound",
    "AmbientLoopSound",
    "SoundProperty",
    "SoundName",
    "SoundPitch",
    "Effect",
    "EffectRegion",
    "WaterEffect",
    "SplashEffect",
    # Soldiers
    "WeaponName",
    "WeaponAmmo",
    "WeaponChannel",
    "MaxSpeed",
    "MaxStrafeSpeed",
    "MaxTurnSpeed",
    "JumpHeight",
    "JumpForwardSpeedFactor",
    "JumpStrafeSpeedFactor",
    "RollSpeedFactor",
    "Acceleration",
    "SprintAccelerateTime",
    "EnergyBar",
    "EnergyRestore",
    "EnergyRestoreIdle",
    "EnergyDrainSprint",
    "EnergyMinSprint",
    "EnergyCostJump",
    "EnergyCostRoll",
    "AimValue",
    "AimFactorPostureSpecial",
    "AimFactorPostureStand",
    "AimFactorPostureCrouch",
    "AimFactorPostureProne",
    "AimFactorStrafe",
    "AimFactorMove",
    "AISizeType",
    "HidingSpots",
    "CapturePosts",
    "NextCharacter",
    "PrevCharacter",
    "UnitType",
    "CanDeploy",
    "SoldierMusic",
    "SoundPropertyHit",
    "VOSound",
    "VOUnitType",
    "FleeLikeAHero",
    "IsHero",
    "HeroDeathSound",
    # Vehicles
    "VehicleType",
    "SpeedMin",
    "SpeedMax",
    "BoostSpeed",
    "ForwardSpeed",
    "ReverseSpeed",
    "StrafeSpeed",
    "TurnRate",
    "TurnFilter",
    "PitchRate",
    "PitchFilter",
    "PitchLimits",
    "YawLimits",
    "LiftSpring",
    "LiftDamp",
    "GravityScale",
    "SetAltitude",
    "MinSpeed",
    "MaxLiftSpeed",
    "FlyerHeight",
    "LandingSpeed",
    "TakeoffSpeed",
    "TakeoffHeight",
    "TakeoffTime",
    "FirePointName",
    "FirePointDirection",
    "PilotPosition",
    "PilotType",
    "PilotAnimation",
    "PilotSkeleton",
    "ExitPosition",
    "EyePointOffset",
    "TrackCenter",
    "TrackOffset",
    "TiltValue",
    "CockpitTexture",
    "CockpitTint",
    "VehicleCollisionSound",
    "EngineSound",
    "TurnOnSound",
    "TurnOffSound",
    "HurtSound",
    "AutoFire",
    "BuildingPlacement",
    "ControlSpeed",
    "NumTurrets",
    "TurretNodeName",
    "TurretYawSound",
    "TurretPitchSound",
    "WingModel",
    "WingName",
    "WingHinge",
    "WingRotation",
    "WingSound",
    "LegPair",
    "LegBoneLeft",
    "LegBoneRight",
    "NumFrames",
    "LegPairSpeed",
    "WalkerLegPair",
    "WalkerWidth",
    "WalkerOrientRoot",
    # Ordnance / weapons
    "OrdnanceName",
    "OrdnanceGeometryName",
    "OrdnanceSound",
    "OrdnanceEffect",
    "FireSound",
    "FireLoopSound",
    "FireEmptySound",
    "ReloadSound",
    "ChargeSound",
    "ChangeModeSound",
    "FireEffect",
    "MuzzleFlash",
    "FlashColor",
    "FlashLength",
    "FlashLightColor",
    "FlashLightRadius",
    "FlashLightDuration",
    "Damage",
    "DamageRadius",
    "DamageRadiusInner",
    "DamageRadiusOuter",
    "Push",
    "PushRadius",
    "Shake",
    "ShakeLength",
    "ShakeRadius",
    "VehicleScale",
    "ShieldScale",
    "PersonScale",
    "DroidScale",
    "BuildingScale",
    "AnimalScale",
    "LifeSpan",
    "Velocity",
    "Gravity",
    "Rebound",
    "Lifetime",
    "LaserTexture",
    "LaserGlowColor",
    "LaserLength",
    "LaserWidth",
    "LightColor",
    "LightRadius",
    "GlowColor",
    "GlowLength",
    "StickPerson",
    "StickVehicle",
    "StickBuilding",
    "StickTerrain",
    "StickAnimal",
    "SeekingSound",
    "TargetSound",
    "LockOnRange",
    "LockOnAngle",
    "LockTime",
    "ReticuleTexture",
    "RoundsPerClip",
    "ReloadTime",
    "ShotDelay",
    "ShotsPerSalvo",
    "SalvoCount",
    "SalvoDelay",
    "SalvoTime",
    "TriggerSingle",
    "MaxPressedTime",
    "ChargeRateLight",
    "ChargeRateHeavy",
    "MaxChargeStrength",
    "ChargeDelayLight",
    "ChargeDelayHeavy",
    "HeatPerShot",
    "HeatRecoverRate",
    "HeatThreshold",
    "Spread",
    "SpreadPerShot",
    "SpreadRecoverRate",
    "SpreadThreshold",
    "SpreadLimit",
    "PitchSpread",
    "YawSpread",
    "MinRange",
    "OptimalRange",
    "MaxRange",
    "ExtremeRange",
    "TargetEnemy",
    "TargetFriendly",
    "TargetNeutral",
    "TargetPerson",
    "TargetAnimal",
    "TargetDroid",
    "TargetVehicle",
    "TargetBuilding",
    "ZoomMin",
    "ZoomMax",
    "ZoomRate",
    "ZoomTexture",
    "ZoomFirstPerson",
    "ScopeTexture",
    "AnimationBank",
    "ComboAnimationBank",
    "HitSound",
    "ImpactEffectSoft",
    "ImpactEffectRigid",
    "ImpactEffectStatic",
    "ImpactEffectTerrain",
    "ImpactEffectWater",
    "ImpactEffectShield",
    "InitialSalvoDelay",
    "MedalsTypeToUnlock",
    "ScoreForMedalsType",
    "DisplayRefire",
    "HUDWeaponModel",
    "HUDWeaponMesh",
    "WeaponSection",
    "DisguiseOdf",
    "Discharge",
    "DispenseSound",
    "DispenseMax",
    "NextDropItem",
    "PowerupDelay",
    "SoldierAmmo",
    "SoldierHealth",
    "VehicleAmmo",
    "VehicleHealth",
    "IsRepair",
    "RepairRate",
    "BuildTime",
    "CostBuild",
    "CostUpgrade",
    # Command posts / buildings
    "CaptureRegion",
    "ControlRegion",
    "SpawnPath",
    "NeutralizeTime",
    "CaptureTime",
    "ValueBleed",
    "SpawnPoint",
    "SpawnTime",
    "ChunkGeometryName",
    "ChunkNodeName",
    "ChunkSpeed",
    "ChunkUpFactor",
    "ChunkOmega",
    "ChunkPhysics",
    "ChunkTerrainCollisions",
    "ChunkTerrainEffect",
    "ChunkTrailEffect",
    "ChunkSmokeEffect",
    "ChunkSmokeNodeName",
    "ChunkStickiness",
    "ChunkBounciness",
    "ChunkDamageEffect",
    "ChunkHealth",
    "IsCollidable",
    "IsTargetable",
    "DoorOpenSound",
    "DoorCloseSound",
    "AutoOpen",
    "OpenDelay",
    "CloseDelay",
    "ControlZone",
)


PROPERTY_HASHES: dict[int, str] = {fnv1a_hash(name): name for name in PROPERTY_NAMES}


def lookup_property_name(key: int) -> str | None:
    return PROPERTY_HASHES.get(key)
